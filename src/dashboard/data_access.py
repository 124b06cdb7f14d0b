"""Шар перетворення стану в DataFrame та фільтрації даних."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from src.contracts.alert import Alert
from src.contracts.reading import Reading

log = logging.getLogger(__name__)

ALL = "All"

SEVERITY_ORDER = {"critical": 0, "warning": 1}
STATUS_ORDER = {"offline": 0, "low": 1, "normal": 2}

READING_COLUMNS = ["reading_id", "panel_id", "power_out", "voltage", "status", "observed_at"]
ALERT_COLUMNS = ["alert_id", "panel_id", "message", "severity", "occurred_at"]


# ── frames ──────────────────────────────────────────────────────────────────


def readings_frame(readings: Sequence[Reading]) -> pd.DataFrame:
    """Повертає DataFrame показань у порядку партії."""
    if not readings:
        return pd.DataFrame(columns=READING_COLUMNS)
    df = pd.DataFrame(
        {
            "reading_id": [r.reading_id for r in readings],
            "panel_id": [r.panel_id for r in readings],
            "power_out": [r.power_out for r in readings],
            "voltage": [r.voltage for r in readings],
            "status": [r.status.value for r in readings],
            "observed_at": pd.to_datetime([r.observed_at for r in readings], utc=True),
        }
    )
    return df


def alerts_frame(alerts: Sequence[Alert]) -> pd.DataFrame:
    """Повертає DataFrame оповіщень у порядку агрегатора."""
    if not alerts:
        return pd.DataFrame(columns=ALERT_COLUMNS)
    return pd.DataFrame(
        {
            "alert_id": [a.alert_id for a in alerts],
            "panel_id": [a.panel_id for a in alerts],
            "message": [a.message for a in alerts],
            "severity": [a.severity.value for a in alerts],
            "occurred_at": pd.to_datetime([a.occurred_at for a in alerts], utc=True),
        }
    )


# ── filtering ───────────────────────────────────────────────────────────────


def panel_options(readings: Sequence[Reading]) -> list[str]:
    """``All`` followed by distinct panel ids in first-seen order."""
    seen: dict[str, None] = {}
    for r in readings:
        if r.panel_id:
            seen.setdefault(r.panel_id, None)
    return [ALL, *seen]


def filter_readings(df: pd.DataFrame, panel: str = ALL) -> pd.DataFrame:
    """Фільтрує показання за панеллю."""
    if df.empty or panel == ALL:
        return df.copy()
    return df.loc[df["panel_id"] == panel].copy()


def filter_alerts(
    df: pd.DataFrame,
    *,
    panel: str = ALL,
    severity: str = ALL,
) -> pd.DataFrame:
    """Застосовує фільтри sidebar до оповіщень."""
    if df.empty:
        return df.copy()
    mask = pd.Series(True, index=df.index)
    if panel != ALL:
        mask &= df["panel_id"] == panel
    if severity != ALL:
        mask &= df["severity"] == severity
    return df.loc[mask].copy()
