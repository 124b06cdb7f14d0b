"""Rule Engine — evaluate user-defined threshold rules against a Reading.

Rules are evaluated in store order (insertion order, no priority). Every
match is reported independently; there is no deduplication across rules.

Equality is exact float comparison unless an ``eq_tolerance`` is given
(``rules.eq_tolerance`` in settings.yaml).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from src.contracts.enums import Condition, Metric
from src.contracts.reading import Reading
from src.contracts.rule import Rule

log = logging.getLogger(__name__)


def _lt(value: float, threshold: float, tolerance: float | None) -> bool:
    return value < threshold


def _gt(value: float, threshold: float, tolerance: float | None) -> bool:
    return value > threshold


def _eq(value: float, threshold: float, tolerance: float | None) -> bool:
    if tolerance is None:
        return value == threshold
    return abs(value - threshold) <= tolerance


_EVALUATORS: dict[Condition, Callable[[float, float, float | None], bool]] = {
    Condition.LT: _lt,
    Condition.GT: _gt,
    Condition.EQ: _eq,
}


def metric_value(reading: Reading, metric: Metric) -> float:
    """Select the comparison value for *metric*."""
    if metric is Metric.POWER:
        return reading.power_out
    return reading.voltage


def rule_matches(rule: Rule, reading: Reading, eq_tolerance: float | None = None) -> bool:
    value = metric_value(reading, rule.metric)
    return _EVALUATORS[rule.condition](value, rule.threshold, eq_tolerance)


def rule_message(rule: Rule) -> str:
    """The rule's own message, or a generated description of it."""
    return rule.message or rule.describe()


def evaluate_rules(
    reading: Reading,
    rules: Iterable[Rule],
    eq_tolerance: float | None = None,
) -> list[Rule]:
    """Return the rules matching *reading*, in store order."""
    matched = [r for r in rules if rule_matches(r, reading, eq_tolerance)]
    if matched:
        log.debug(
            "Reading %s (%s) matched rules: %s",
            reading.reading_id,
            reading.panel_id,
            ", ".join(r.rule_id for r in matched),
        )
    return matched
