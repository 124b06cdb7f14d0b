"""Shared fixtures for SolarWatch tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from src.contracts.alert import Alert
from src.contracts.enums import Condition, Metric, PanelStatus, Severity
from src.contracts.reading import Reading
from src.contracts.rule import Rule

BASE_TS = "2026-03-01T10:00:00Z"

# ── Helpers: create contracts with sensible defaults ─────────────────────


def ts_offset(base: str = BASE_TS, seconds: int = 0) -> str:
    """Return an ISO-8601 timestamp offset from *base* by *seconds*."""
    dt = datetime.fromisoformat(base.replace("Z", "+00:00"))
    dt += timedelta(seconds=seconds)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def dt_offset(seconds: int = 0) -> datetime:
    return datetime(2026, 3, 1, 10, 0, 0, tzinfo=UTC) + timedelta(seconds=seconds)


def make_row(
    id_panel: str | None = "PV001",
    power: str | None = "300",
    voltage: str | None = "230",
    timestamp: str | None = BASE_TS,
) -> dict[str, str | None]:
    return {"id_panel": id_panel, "power": power, "voltage": voltage, "timestamp": timestamp}


def make_reading(
    *,
    reading_id: str = "RDG-0001",
    panel_id: str = "PV001",
    power_out: float = 300.0,
    voltage: float = 230.0,
    status: PanelStatus = PanelStatus.NORMAL,
    observed_at: datetime | None = None,
) -> Reading:
    return Reading(
        reading_id=reading_id,
        panel_id=panel_id,
        power_out=power_out,
        voltage=voltage,
        status=status,
        observed_at=observed_at or dt_offset(),
    )


def make_rule(
    *,
    rule_id: str = "RULE-001",
    metric: Metric = Metric.POWER,
    condition: Condition = Condition.LT,
    threshold: float = 100.0,
    severity: Severity = Severity.CRITICAL,
    message: str = "Power below 100 W",
) -> Rule:
    return Rule(
        rule_id=rule_id,
        metric=metric,
        condition=condition,
        threshold=threshold,
        severity=severity,
        message=message,
    )


def make_alert(
    *,
    alert_id: str = "ALR-0001",
    panel_id: str = "PV001",
    message: str = "Panel PV001 is offline: Potential theft detected",
    severity: Severity = Severity.CRITICAL,
    occurred_at: datetime | None = None,
) -> Alert:
    return Alert(
        alert_id=alert_id,
        panel_id=panel_id,
        message=message,
        severity=severity,
        occurred_at=occurred_at or dt_offset(),
    )


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def scenario_rows() -> list[dict[str, str]]:
    """Offline, low-power and low-voltage readings of one panel."""
    return [
        make_row("PV001", "0", "220", ts_offset(seconds=0)),
        make_row("PV001", "30", "220", ts_offset(seconds=300)),
        make_row("PV001", "500", "150", ts_offset(seconds=600)),
    ]


@pytest.fixture
def scenario_csv() -> str:
    return (
        "id_panel,power,voltage,timestamp\n"
        "PV001,0,220,2026-03-01T10:00:00Z\n"
        "PV001,30,220,2026-03-01T10:05:00Z\n"
        "PV001,500,150,2026-03-01T10:10:00Z\n"
    )


@pytest.fixture
def power_lt_rule() -> Rule:
    return make_rule()


@pytest.fixture
def settings_yaml(tmp_path):
    """Write a settings.yaml into tmp_path/config and return the config dir."""
    import yaml

    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    cfg = {
        "thresholds": {"power": 50, "voltage": 200},
        "rules": {"eq_tolerance": None},
        "ingest": {"timezone": "UTC"},
        "state": {"path": str(tmp_path / "state.json")},
    }
    with open(cfg_dir / "settings.yaml", "w", encoding="utf-8") as fh:
        yaml.safe_dump(cfg, fh)
    return cfg_dir
