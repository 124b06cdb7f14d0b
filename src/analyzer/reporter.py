"""Звітування: експорт оповіщень і показань у CSV, текстовий підсумок."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from src.analyzer.metrics import BatchSummary
from src.contracts.alert import Alert
from src.contracts.reading import Reading

log = logging.getLogger(__name__)


def atomic_write(path: str | Path, content: str) -> None:
    """Атомарно записує content у файл path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(target.parent),
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, target)
    except BaseException:
        # Clean up temp file on any failure
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


# ═══════════════════════════════════════════════════════════════════════════
#  CSV export
# ═══════════════════════════════════════════════════════════════════════════


def render_alerts_csv(alerts: Sequence[Alert]) -> str:
    """Alert export text: ``id_panel,alertMessage,severityLevel,when``."""
    lines = [Alert.csv_header()]
    lines.extend(a.to_csv_row() for a in alerts)
    return "\n".join(lines) + "\n"


def render_readings_csv(readings: Sequence[Reading]) -> str:
    lines = [Reading.csv_header()]
    lines.extend(r.to_csv_row() for r in readings)
    return "\n".join(lines) + "\n"


def write_alerts_csv(alerts: Sequence[Alert], path: str | Path) -> None:
    atomic_write(path, render_alerts_csv(alerts))
    log.info("Wrote alerts → %s (%d rows)", path, len(alerts))


def write_readings_csv(readings: Sequence[Reading], path: str | Path) -> None:
    atomic_write(path, render_readings_csv(readings))
    log.info("Wrote readings → %s (%d rows)", path, len(readings))


def render_summary_csv(summary: BatchSummary) -> str:
    return BatchSummary.csv_header() + "\n" + summary.to_csv_row() + "\n"


def write_summary_csv(summary: BatchSummary, path: str | Path) -> None:
    atomic_write(path, render_summary_csv(summary))
    log.info("Wrote summary → %s", path)


# ═══════════════════════════════════════════════════════════════════════════
#  TXT summary
# ═══════════════════════════════════════════════════════════════════════════


def render_summary_txt(summary: BatchSummary, alerts: Sequence[Alert]) -> str:
    """Генерує текстовий підсумок партії."""
    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("  SolarWatch Batch Report")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"  Readings:         {summary.total_readings}")
    lines.append(f"  Panels:           {summary.panels}")
    lines.append(f"  Active:           {summary.active}")
    lines.append(f"  Low power:        {summary.low}")
    lines.append(f"  Offline:          {summary.offline}")
    lines.append(f"  Average power:    {summary.avg_power_w:.2f} W")
    sev_str = ", ".join(f"{k}={v}" for k, v in sorted(summary.alerts_by_severity.items()))
    lines.append(f"  Alerts:           {summary.alerts_total} ({sev_str or 'none'})")
    lines.append("")

    if alerts:
        lines.append("--- Alerts ---")
        for a in alerts:
            lines.append(
                f"  [{a.severity.value.upper():8s}] {a.occurred_at:%Y-%m-%d %H:%M:%S}  {a.message}"
            )
        lines.append("")
    lines.append("=" * 60)
    return "\n".join(lines) + "\n"


def write_summary_txt(summary: BatchSummary, alerts: Sequence[Alert], path: str | Path) -> None:
    atomic_write(path, render_summary_txt(summary, alerts))
    log.info("Wrote report → %s", path)
