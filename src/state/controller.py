"""AppController — single owner of the live readings, alerts and rules.

Every mutation goes through a method here and is followed by one
``storage.save``. Batch analysis takes a snapshot of the rule store, so a
rule edit only affects the next submission.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from src.analyzer.classifier import Thresholds
from src.analyzer.metrics import BatchSummary, summarize
from src.analyzer.notifier import AlertNotifier
from src.analyzer.pipeline import BatchResult, analyze_batch
from src.analyzer.reporter import render_alerts_csv
from src.contracts.alert import Alert
from src.contracts.enums import Severity
from src.contracts.reading import Reading
from src.contracts.rule import Rule, RuleDraft
from src.ingest.loader import load_batch_file, read_rows
from src.rulebook.store import RuleStore
from src.shared.config_loader import Settings
from src.state.audio import AudioAsset
from src.state.storage import NullStorage, StateSnapshot, StateStorage

log = logging.getLogger(__name__)


def resolve_tz(tz_name: str) -> tzinfo:
    """Повертає tzinfo об'єкт для вказаного імені часового поясу."""
    if tz_name.upper() == "UTC":
        return UTC
    return ZoneInfo(tz_name)


@dataclass
class AppState:
    """Explicit application state: the three collections plus audio refs."""

    readings: list[Reading] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    rules: RuleStore = field(default_factory=RuleStore)
    audio: dict[str, AudioAsset] = field(default_factory=dict)

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            readings=list(self.readings),
            alerts=list(self.alerts),
            rules=list(self.rules.rules),
            audio=dict(self.audio),
        )


class AppController:
    """Thin mutation layer over AppState that persists after each transition."""

    def __init__(
        self,
        settings: Settings | None = None,
        storage: StateStorage | None = None,
        notifier: AlertNotifier | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.storage: StateStorage = storage or NullStorage()
        self.notifier = notifier or AlertNotifier()
        snap = self.storage.load()
        self.state = AppState(
            readings=snap.readings,
            alerts=snap.alerts,
            rules=RuleStore.from_rules(snap.rules),
            audio=snap.audio,
        )

    # ── read access ──────────────────────────────────────────────────────

    @property
    def readings(self) -> tuple[Reading, ...]:
        return tuple(self.state.readings)

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return tuple(self.state.alerts)

    @property
    def rule_store(self) -> RuleStore:
        return self.state.rules

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self.state.rules.rules

    @property
    def thresholds(self) -> Thresholds:
        return self.settings.thresholds

    def summary(self) -> BatchSummary:
        return summarize(self.state.readings, self.state.alerts)

    def export_alerts_csv(self) -> str:
        return render_alerts_csv(self.state.alerts)

    # ── batch submission ─────────────────────────────────────────────────

    def submit_rows(
        self,
        rows: Iterable[Mapping[str, str | None]],
        now: datetime | None = None,
    ) -> BatchResult:
        """Analyse a batch and replace readings + alerts wholesale."""
        result = analyze_batch(
            rows,
            self.state.rules.rules,
            thresholds=self.settings.thresholds,
            eq_tolerance=self.settings.eq_tolerance,
            tz=resolve_tz(self.settings.timezone),
            now=now,
        )
        self.state.readings = list(result.readings)
        self.state.alerts = list(result.alerts)
        self._persist()
        self.notifier.dispatch(result.alerts)
        return result

    def submit_text(self, text: str, now: datetime | None = None) -> BatchResult:
        """Analyse pasted / uploaded text.

        Raises:
            EmptyBatchError: Before any state change, for empty text.
        """
        return self.submit_rows(read_rows(text), now=now)

    def submit_file(self, path: str | Path, now: datetime | None = None) -> BatchResult:
        return self.submit_rows(load_batch_file(path), now=now)

    def dismiss_alert(self, alert_id: str) -> bool:
        """Remove one alert from the live list. Readings are untouched."""
        before = len(self.state.alerts)
        self.state.alerts = [a for a in self.state.alerts if a.alert_id != alert_id]
        if len(self.state.alerts) == before:
            return False
        log.info("Dismissed alert %s", alert_id)
        self._persist()
        return True

    def clear(self) -> None:
        """Drop readings, alerts, rules and audio references."""
        self.state = AppState()
        self.storage.clear()
        log.info("Data cleared")

    # ── configuration ────────────────────────────────────────────────────

    def set_thresholds(
        self,
        power: float | None = None,
        voltage: float | None = None,
    ) -> Thresholds:
        """Change thresholds; they apply from the next batch on."""
        self.settings = self.settings.with_overrides(
            power_threshold=power,
            voltage_threshold=voltage,
        )
        return self.settings.thresholds

    # ── rule editing ─────────────────────────────────────────────────────

    def start_create_rule(self) -> RuleDraft:
        return self.state.rules.start_create()

    def start_edit_rule(self, rule_id: str) -> RuleDraft | None:
        return self.state.rules.start_edit(rule_id)

    def save_rule(self, draft: RuleDraft | None = None) -> Rule:
        """Commit the rule draft.

        Raises:
            RuleValidationError: Draft rejected; the store stays in edit.
        """
        rule = self.state.rules.save(draft)
        self._persist()
        return rule

    def cancel_rule_edit(self) -> None:
        self.state.rules.cancel()

    def delete_rule(self, rule_id: str) -> bool:
        deleted = self.state.rules.delete(rule_id)
        if deleted:
            self._persist()
        return deleted

    def import_rules(self, rules: Iterable[Rule]) -> list[Rule]:
        added = [self.state.rules.add(r) for r in rules]
        if added:
            self._persist()
        return added

    # ── audio references ─────────────────────────────────────────────────

    def set_audio(self, severity: Severity, asset: AudioAsset) -> None:
        self.state.audio[severity.value] = asset
        self._persist()

    def clear_audio(self, severity: Severity) -> None:
        if self.state.audio.pop(severity.value, None) is not None:
            self._persist()

    def audio_for(self, severity: Severity) -> AudioAsset | None:
        return self.state.audio.get(severity.value)

    # ── internals ────────────────────────────────────────────────────────

    def _persist(self) -> None:
        self.storage.save(self.state.snapshot())
