"""Batch summary — dashboard statistics for the current batch.

Metrics
───────
  total_readings
      Number of valid readings in the batch.

  panels
      Number of distinct panel ids.

  active
      Readings classified ``normal``.

  low / offline
      Readings classified ``low`` / ``offline``.

  avg_power_w
      Mean ``power_out`` over *all* readings (offline ones count as 0 W),
      0.0 for an empty batch.

  alerts_total / alerts_by_severity
      Live (non-dismissed) alerts and their per-severity counts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.contracts.alert import Alert
from src.contracts.enums import PanelStatus
from src.contracts.reading import Reading

log = logging.getLogger(__name__)


SUMMARY_CSV_COLUMNS = [
    "total_readings",
    "panels",
    "active",
    "low",
    "offline",
    "avg_power_w",
    "alerts_total",
    "alerts_critical",
    "alerts_warning",
]


@dataclass
class BatchSummary:
    """Агреговані показники однієї партії показань."""

    total_readings: int = 0
    panels: int = 0
    active: int = 0
    low: int = 0
    offline: int = 0
    avg_power_w: float = 0.0
    alerts_total: int = 0
    alerts_by_severity: dict[str, int] = field(default_factory=dict)

    def to_csv_row(self) -> str:
        sev = self.alerts_by_severity
        vals = [
            str(self.total_readings),
            str(self.panels),
            str(self.active),
            str(self.low),
            str(self.offline),
            f"{self.avg_power_w:.2f}",
            str(self.alerts_total),
            str(sev.get("critical", 0)),
            str(sev.get("warning", 0)),
        ]
        return ",".join(vals)

    @staticmethod
    def csv_header() -> str:
        return ",".join(SUMMARY_CSV_COLUMNS)


def summarize(readings: Sequence[Reading], alerts: Sequence[Alert] = ()) -> BatchSummary:
    """Обчислює підсумкові показники партії.

    Args:
        readings: Показання поточної партії.
        alerts: Поточні (не відхилені) оповіщення.

    Returns:
        BatchSummary з обчисленими значеннями.
    """
    s = BatchSummary()
    for a in alerts:
        s.alerts_by_severity[a.severity.value] = s.alerts_by_severity.get(a.severity.value, 0) + 1
    s.alerts_total = len(alerts)

    if not readings:
        return s

    s.total_readings = len(readings)
    s.panels = len({r.panel_id for r in readings})
    s.active = sum(1 for r in readings if r.status is PanelStatus.NORMAL)
    s.low = sum(1 for r in readings if r.status is PanelStatus.LOW)
    s.offline = sum(1 for r in readings if r.status is PanelStatus.OFFLINE)
    s.avg_power_w = round(sum(r.power_out for r in readings) / len(readings), 2)

    log.debug(
        "Summary: readings=%d active=%d low=%d offline=%d avg=%.2fW alerts=%d",
        s.total_readings,
        s.active,
        s.low,
        s.offline,
        s.avg_power_w,
        s.alerts_total,
    )
    return s
