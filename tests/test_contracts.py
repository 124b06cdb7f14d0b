"""Tests for src.contracts — Reading, Rule, Alert data classes and enums."""

from __future__ import annotations

import csv
import dataclasses
import io

import pytest

from src.contracts.alert import ALERT_CSV_COLUMNS, Alert
from src.contracts.enums import Condition, Metric, PanelStatus, Severity
from src.contracts.reading import READING_CSV_COLUMNS, Reading
from src.contracts.rule import Rule, RuleDraft, format_threshold
from tests.conftest import dt_offset, make_alert, make_reading, make_rule

# ═══════════════════════════════════════════════════════════════════════════
#  Enums
# ═══════════════════════════════════════════════════════════════════════════


class TestEnums:
    def test_status_values(self):
        assert {s.value for s in PanelStatus} == {"normal", "low", "offline"}

    def test_severity_values(self):
        assert {s.value for s in Severity} == {"warning", "critical"}

    def test_enums_are_str(self):
        assert Metric.POWER == "power"
        assert isinstance(Condition.LT, str)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("lt", Condition.LT),
            ("<", Condition.LT),
            (">", Condition.GT),
            ("GT", Condition.GT),
            ("=", Condition.EQ),
            (" eq ", Condition.EQ),
        ],
    )
    def test_condition_parse(self, raw, expected):
        assert Condition.parse(raw) is expected

    def test_condition_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            Condition.parse(">=")

    def test_condition_symbols(self):
        assert [c.symbol for c in Condition] == ["<", ">", "="]


# ═══════════════════════════════════════════════════════════════════════════
#  Reading
# ═══════════════════════════════════════════════════════════════════════════


class TestReading:
    def test_is_immutable(self):
        r = make_reading()
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.power_out = 1.0  # type: ignore[misc]

    def test_csv_header(self):
        assert Reading.csv_header() == ",".join(READING_CSV_COLUMNS)

    def test_to_csv_row(self):
        row = make_reading(power_out=30.5, voltage=220.0, status=PanelStatus.LOW).to_csv_row()
        values = next(csv.reader(io.StringIO(row)))
        assert values == ["PV001", "30.5", "220", "low", "2026-03-01T10:00:00Z"]

    def test_dict_roundtrip_preserves_fields(self):
        r = make_reading(status=PanelStatus.OFFLINE, power_out=0.0)
        assert Reading.from_dict(r.to_dict()) == r


# ═══════════════════════════════════════════════════════════════════════════
#  Alert
# ═══════════════════════════════════════════════════════════════════════════


class TestAlert:
    def test_csv_header_matches_export_format(self):
        assert Alert.csv_header() == "id_panel,alertMessage,severityLevel,when"
        assert ALERT_CSV_COLUMNS == ["id_panel", "alertMessage", "severityLevel", "when"]

    def test_to_csv_row_quotes_message_with_comma(self):
        a = make_alert(message="Panel PV001 has low power: 30.00W, check wiring")
        values = next(csv.reader(io.StringIO(a.to_csv_row())))
        assert values[1] == "Panel PV001 has low power: 30.00W, check wiring"
        assert values[2] == "critical"
        assert values[3] == "2026-03-01T10:00:00Z"

    def test_from_dict(self):
        a = Alert.from_dict(
            {
                "alert_id": "ALR-0002",
                "panel_id": "PV002",
                "message": "m",
                "severity": "warning",
                "occurred_at": "2026-03-01T10:00:05Z",
            }
        )
        assert a.severity is Severity.WARNING
        assert a.occurred_at == dt_offset(5)


# ═══════════════════════════════════════════════════════════════════════════
#  Rule / RuleDraft
# ═══════════════════════════════════════════════════════════════════════════


class TestRule:
    def test_describe_fallback(self):
        rule = make_rule(message="", threshold=100.0)
        assert rule.describe() == "Custom alert: power < 100"

    def test_describe_keeps_large_threshold_in_full(self):
        rule = make_rule(message="", threshold=1234567.0)
        assert rule.describe() == "Custom alert: power < 1234567"

    @pytest.mark.parametrize(
        "value,expected",
        [(100.0, "100"), (230.5, "230.5"), (0.1, "0.1"), (-5.0, "-5"), (1234567.25, "1234567.25")],
    )
    def test_format_threshold(self, value, expected):
        assert format_threshold(value) == expected

    def test_describe_keeps_fraction(self):
        rule = make_rule(metric=Metric.VOLTAGE, condition=Condition.EQ, threshold=230.5)
        assert rule.describe() == "Custom alert: voltage = 230.5"

    def test_from_dict_accepts_symbol_condition(self):
        rule = Rule.from_dict(
            {
                "rule_id": "RULE-007",
                "metric": "voltage",
                "condition": ">",
                "threshold": "260",
                "severity": "warning",
            }
        )
        assert rule.condition is Condition.GT
        assert rule.threshold == 260.0
        assert rule.message == ""

    def test_draft_from_rule(self):
        draft = RuleDraft.from_rule(make_rule())
        assert draft.threshold == 100.0
        assert draft.metric is Metric.POWER

    def test_draft_from_form(self):
        draft = RuleDraft.from_form(
            {
                "metric": "voltage",
                "condition": "<",
                "threshold": "190",
                "severity": "critical",
                "message": "sag",
            }
        )
        assert draft.metric is Metric.VOLTAGE
        assert draft.condition is Condition.LT
        assert draft.threshold == "190"
        assert draft.severity is Severity.CRITICAL

    def test_blank_draft_defaults(self):
        draft = RuleDraft()
        assert draft.metric is Metric.POWER
        assert draft.condition is Condition.LT
        assert draft.severity is Severity.WARNING
        assert draft.threshold == ""
