"""User-defined threshold Rule and the editable RuleDraft behind the rule form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.contracts.enums import Condition, Metric, Severity


def format_threshold(value: float) -> str:
    """Full-precision threshold text: ``100``, ``230.5``, ``1234567``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True, slots=True)
class Rule:
    """A threshold condition that raises an Alert when a Reading matches."""

    rule_id: str  # e.g. "RULE-001"
    metric: Metric
    condition: Condition
    threshold: float
    severity: Severity
    message: str = ""

    def describe(self) -> str:
        """Generated description, used when the rule has no message."""
        return (
            f"Custom alert: {self.metric.value} {self.condition.symbol} "
            f"{format_threshold(self.threshold)}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "metric": self.metric.value,
            "condition": self.condition.value,
            "threshold": self.threshold,
            "severity": self.severity.value,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rule:
        return cls(
            rule_id=str(data["rule_id"]),
            metric=Metric(data["metric"]),
            condition=Condition.parse(data["condition"]),
            threshold=float(data["threshold"]),
            severity=Severity(data["severity"]),
            message=str(data.get("message") or ""),
        )


@dataclass(slots=True)
class RuleDraft:
    """Form state for a rule being created or edited.

    ``threshold`` is kept as typed by the operator (string or number) and
    only validated on save.
    """

    metric: Metric = Metric.POWER
    condition: Condition = Condition.LT
    threshold: str | float = ""
    severity: Severity = Severity.WARNING
    message: str = ""

    @classmethod
    def from_rule(cls, rule: Rule) -> RuleDraft:
        return cls(
            metric=rule.metric,
            condition=rule.condition,
            threshold=rule.threshold,
            severity=rule.severity,
            message=rule.message,
        )

    @classmethod
    def from_form(cls, fields: dict[str, Any]) -> RuleDraft:
        """Build a draft from raw form fields (metric, condition, threshold, severity, message)."""
        return cls(
            metric=Metric(str(fields.get("metric", Metric.POWER.value)).strip().lower()),
            condition=Condition.parse(fields.get("condition", Condition.LT.value)),
            threshold=fields.get("threshold", ""),
            severity=Severity(str(fields.get("severity", Severity.WARNING.value)).strip().lower()),
            message=str(fields.get("message") or ""),
        )
