"""Alert Aggregator — built-in heuristics + rule matches → ordered Alerts.

For every Reading, in batch order, alerts are emitted in this fixed order:

  (a) offline                  → critical "offline / potential theft"
  (b) else low power           → warning with formatted wattage
  (c) voltage below threshold  → warning (independent of status)
  (d) two-sigma power anomaly  → warning
  (e) each matching user Rule  → rule severity, in store order

All alerts of a reading carry its ``panel_id`` and ``observed_at``. Alert
ids are numbered per pass (``ALR-0001`` …) so they stay unique even when a
single reading yields several alerts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.analyzer.classifier import Thresholds
from src.analyzer.rule_engine import evaluate_rules, rule_message
from src.analyzer.statistics import PowerStats, compute_power_stats, is_anomalous
from src.contracts.alert import Alert
from src.contracts.enums import PanelStatus, Severity
from src.contracts.reading import Reading
from src.contracts.rule import Rule

log = logging.getLogger(__name__)


def _builtin_alerts(
    reading: Reading,
    thresholds: Thresholds,
    stats: PowerStats,
) -> list[tuple[str, Severity]]:
    pid = reading.panel_id
    found: list[tuple[str, Severity]] = []

    if reading.status is PanelStatus.OFFLINE:
        found.append((f"Panel {pid} is offline: Potential theft detected", Severity.CRITICAL))
    elif reading.status is PanelStatus.LOW:
        found.append((f"Panel {pid} has low power: {reading.power_out:.2f}W", Severity.WARNING))

    if reading.voltage < thresholds.voltage:
        found.append((f"Panel {pid} has low voltage: {reading.voltage:.2f}V", Severity.WARNING))

    if is_anomalous(reading.power_out, stats):
        found.append(
            (
                f"Anomaly in {pid}: Power {reading.power_out:.2f}W deviates significantly",
                Severity.WARNING,
            )
        )
    return found


def aggregate(
    readings: Sequence[Reading],
    rules: Sequence[Rule],
    thresholds: Thresholds | None = None,
    stats: PowerStats | None = None,
    eq_tolerance: float | None = None,
) -> list[Alert]:
    """Build the full alert sequence for one batch.

    Parameters
    ──────────
    readings
        The batch, in input order.
    rules
        Rule Store snapshot, in store order.
    thresholds
        Power / voltage thresholds (defaults 50 W / 200 V).
    stats
        Precomputed power baseline; computed from *readings* when None.
    """
    thresholds = thresholds or Thresholds()
    stats = stats if stats is not None else compute_power_stats(readings)

    alerts: list[Alert] = []
    counter = 0

    for reading in readings:
        found = _builtin_alerts(reading, thresholds, stats)
        for rule in evaluate_rules(reading, rules, eq_tolerance):
            found.append((rule_message(rule), rule.severity))

        for message, severity in found:
            counter += 1
            alerts.append(
                Alert(
                    alert_id=f"ALR-{counter:04d}",
                    panel_id=reading.panel_id,
                    message=message,
                    severity=severity,
                    occurred_at=reading.observed_at,
                )
            )

    log.info(
        "Aggregator raised %d alerts from %d readings (%d rules)",
        len(alerts),
        len(readings),
        len(rules),
    )
    return alerts
