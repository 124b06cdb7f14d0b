"""Pipeline — one synchronous pass: rows → parse → stats → rules → alerts.

The whole pass runs to completion on an in-memory batch; nothing here does
I/O beyond logging. Callers resolve files / pasted text into rows first
(``src.ingest.loader``) and pass a snapshot of the Rule Store, so a rule
edit only affects the next pass.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo

from src.analyzer.aggregator import aggregate
from src.analyzer.classifier import Thresholds
from src.analyzer.statistics import PowerStats, compute_power_stats
from src.contracts.alert import Alert
from src.contracts.reading import Reading
from src.contracts.rule import Rule
from src.ingest.loader import read_rows
from src.ingest.parser import parse_rows

log = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchResult:
    """Everything one analysis pass produces."""

    readings: list[Reading] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    stats: PowerStats = field(default_factory=PowerStats)
    rejected: int = 0


def analyze_batch(
    rows: Iterable[Mapping[str, str | None]],
    rules: Sequence[Rule] = (),
    *,
    thresholds: Thresholds | None = None,
    eq_tolerance: float | None = None,
    tz: tzinfo = UTC,
    now: datetime | None = None,
) -> BatchResult:
    """Run the full pipeline over raw rows and return readings + alerts."""
    thresholds = thresholds or Thresholds()
    rules = tuple(rules)

    parsed = parse_rows(rows, power_threshold=thresholds.power, tz=tz, now=now)
    if not parsed.readings:
        log.warning("No valid readings in batch (%d rows rejected)", parsed.rejected)

    stats = compute_power_stats(parsed.readings)
    alerts = aggregate(
        parsed.readings,
        rules,
        thresholds=thresholds,
        stats=stats,
        eq_tolerance=eq_tolerance,
    )

    log.info(
        "Batch analysed: readings=%d rejected=%d alerts=%d (power<%.1fW, voltage<%.1fV)",
        len(parsed.readings),
        parsed.rejected,
        len(alerts),
        thresholds.power,
        thresholds.voltage,
    )
    return BatchResult(
        readings=parsed.readings,
        alerts=alerts,
        stats=stats,
        rejected=parsed.rejected,
    )


def analyze_text(
    text: str,
    rules: Sequence[Rule] = (),
    **kwargs,
) -> BatchResult:
    """Same as ``analyze_batch`` for delimited text (file contents or paste).

    Raises:
        EmptyBatchError: If *text* is empty or whitespace-only.
    """
    return analyze_batch(read_rows(text), rules, **kwargs)
