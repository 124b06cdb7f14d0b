"""Notifier — dispatch alert events to presentation collaborators.

Alert generation is pure; after a pass the controller hands the new alerts
to an ``AlertNotifier`` which emits one event per alert:

  criticalAlertRaised — severity == critical
  warningAlertRaised  — severity == warning

Listeners decide how to present them (sound, toast, log line). A failing
listener is logged and skipped; it never aborts the batch.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable

from src.contracts.alert import Alert
from src.contracts.enums import Severity

log = logging.getLogger(__name__)

CRITICAL_ALERT_RAISED = "criticalAlertRaised"
WARNING_ALERT_RAISED = "warningAlertRaised"

EVENT_FOR_SEVERITY: dict[Severity, str] = {
    Severity.CRITICAL: CRITICAL_ALERT_RAISED,
    Severity.WARNING: WARNING_ALERT_RAISED,
}

Listener = Callable[[Alert], None]


class AlertNotifier:
    """Fan-out of alert events to registered listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> None:
        if event not in EVENT_FOR_SEVERITY.values():
            raise ValueError(f"Unknown alert event '{event}'")
        self._listeners[event].append(listener)

    def on_critical(self, listener: Listener) -> None:
        self.subscribe(CRITICAL_ALERT_RAISED, listener)

    def on_warning(self, listener: Listener) -> None:
        self.subscribe(WARNING_ALERT_RAISED, listener)

    def dispatch(self, alerts: Iterable[Alert]) -> dict[str, int]:
        """Emit one event per alert. Returns the number of events per kind."""
        counts = {CRITICAL_ALERT_RAISED: 0, WARNING_ALERT_RAISED: 0}
        for alert in alerts:
            event = EVENT_FOR_SEVERITY[alert.severity]
            counts[event] += 1
            for listener in self._listeners.get(event, []):
                try:
                    listener(alert)
                except Exception:
                    log.exception("Listener for %s failed on %s", event, alert.alert_id)
        if any(counts.values()):
            log.info(
                "Dispatched %d critical, %d warning alert events",
                counts[CRITICAL_ALERT_RAISED],
                counts[WARNING_ALERT_RAISED],
            )
        return counts
