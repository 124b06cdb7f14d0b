"""Persistence collaborators for the application state.

``JsonStateStorage`` writes one JSON document (readings, alerts, rules,
audio references) atomically after every mutation and reads it back at
startup. A corrupt document is logged, removed and treated as empty.
``NullStorage`` keeps nothing; the core works the same with either.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from src.analyzer.reporter import atomic_write
from src.contracts.alert import Alert
from src.contracts.reading import Reading
from src.contracts.rule import Rule
from src.state.audio import AudioAsset

log = logging.getLogger(__name__)

STATE_VERSION = 1


@dataclass(slots=True)
class StateSnapshot:
    """Plain-data view of everything that is persisted."""

    readings: list[Reading] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    rules: list[Rule] = field(default_factory=list)
    audio: dict[str, AudioAsset] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "readings": [r.to_dict() for r in self.readings],
            "alerts": [a.to_dict() for a in self.alerts],
            "rules": [r.to_dict() for r in self.rules],
            "audio": {k: v.to_dict() for k, v in self.audio.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StateSnapshot:
        """Rebuild a snapshot from a parsed state document.

        Raises:
            ValueError: If the document or its ``audio`` section is not a mapping.
        """
        if not isinstance(data, dict):
            raise ValueError(f"state document must be an object, got {type(data).__name__}")
        audio = data.get("audio") or {}
        if not isinstance(audio, dict):
            raise ValueError(f"audio must be an object, got {type(audio).__name__}")
        return cls(
            readings=[Reading.from_dict(r) for r in data.get("readings", [])],
            alerts=[Alert.from_dict(a) for a in data.get("alerts", [])],
            rules=[Rule.from_dict(r) for r in data.get("rules", [])],
            audio={k: AudioAsset.from_dict(v) for k, v in audio.items()},
        )


class StateStorage(Protocol):
    def load(self) -> StateSnapshot: ...

    def save(self, snapshot: StateSnapshot) -> None: ...

    def clear(self) -> None: ...


class NullStorage:
    """Storage that persists nothing."""

    def load(self) -> StateSnapshot:
        return StateSnapshot()

    def save(self, snapshot: StateSnapshot) -> None:
        pass

    def clear(self) -> None:
        pass


class JsonStateStorage:
    """State persisted as a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> StateSnapshot:
        if not self.path.exists():
            log.debug("No saved state at %s", self.path)
            return StateSnapshot()
        try:
            with self.path.open(encoding="utf-8") as fh:
                snapshot = StateSnapshot.from_dict(json.load(fh))
        except (json.JSONDecodeError, AttributeError, KeyError, ValueError, TypeError) as exc:
            log.error("Failed to load saved state %s: %s; starting empty", self.path, exc)
            self.clear()
            return StateSnapshot()
        log.info(
            "Loaded state: %d readings, %d alerts, %d rules",
            len(snapshot.readings),
            len(snapshot.alerts),
            len(snapshot.rules),
        )
        return snapshot

    def save(self, snapshot: StateSnapshot) -> None:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        atomic_write(self.path, payload + "\n")
        log.debug("Saved state → %s", self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
