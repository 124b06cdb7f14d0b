"""Завантаження YAML конфігурацій та налаштувань SolarWatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from src.analyzer.classifier import (
    DEFAULT_POWER_THRESHOLD,
    DEFAULT_VOLTAGE_THRESHOLD,
    Thresholds,
)

log = logging.getLogger(__name__)

DEFAULT_STATE_PATH = "out/state.json"


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.

    Returns:
        Вміст файлу як словник.

    Raises:
        FileNotFoundError: Якщо файл не знайдено.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide operator settings (config/settings.yaml)."""

    thresholds: Thresholds = field(default_factory=Thresholds)
    eq_tolerance: float | None = None
    timezone: str = "UTC"
    state_path: str = DEFAULT_STATE_PATH

    def with_overrides(
        self,
        *,
        power_threshold: float | None = None,
        voltage_threshold: float | None = None,
        state_path: str | None = None,
    ) -> Settings:
        """Return a copy with CLI / UI overrides applied (None = keep)."""
        thresholds = Thresholds(
            power=self.thresholds.power if power_threshold is None else power_threshold,
            voltage=self.thresholds.voltage if voltage_threshold is None else voltage_threshold,
        )
        return replace(
            self,
            thresholds=thresholds,
            state_path=self.state_path if state_path is None else state_path,
        )


def settings_from_config(cfg: dict[str, Any]) -> Settings:
    """Build Settings from the parsed YAML dict, falling back to defaults."""
    thr = cfg.get("thresholds") or {}
    rules_cfg = cfg.get("rules") or {}
    ingest_cfg = cfg.get("ingest") or {}
    state_cfg = cfg.get("state") or {}

    tolerance = rules_cfg.get("eq_tolerance")
    return Settings(
        thresholds=Thresholds(
            power=float(thr.get("power", DEFAULT_POWER_THRESHOLD)),
            voltage=float(thr.get("voltage", DEFAULT_VOLTAGE_THRESHOLD)),
        ),
        eq_tolerance=None if tolerance is None else float(tolerance),
        timezone=str(ingest_cfg.get("timezone", "UTC")),
        state_path=str(state_cfg.get("path", DEFAULT_STATE_PATH)),
    )


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings.yaml; a missing *path* (None) yields the defaults."""
    if path is None:
        return Settings()
    settings = settings_from_config(load_yaml(path))
    log.info(
        "Settings: power<%.1fW voltage<%.1fV eq_tolerance=%s tz=%s",
        settings.thresholds.power,
        settings.thresholds.voltage,
        settings.eq_tolerance,
        settings.timezone,
    )
    return settings
