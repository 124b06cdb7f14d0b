"""Canonical enumerations shared by the ingest, analyzer and rulebook modules."""

from __future__ import annotations

from enum import Enum


class PanelStatus(str, Enum):
    NORMAL = "normal"
    LOW = "low"
    OFFLINE = "offline"


class Severity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class Metric(str, Enum):
    POWER = "power"
    VOLTAGE = "voltage"


class Condition(str, Enum):
    """Comparison applied by a Rule: ``value <op> threshold``."""

    LT = "lt"
    GT = "gt"
    EQ = "eq"

    @property
    def symbol(self) -> str:
        return _CONDITION_SYMBOLS[self]

    @classmethod
    def parse(cls, raw: str | Condition) -> Condition:
        """Accept both the enum value (``lt``) and the operator (``<``)."""
        if isinstance(raw, Condition):
            return raw
        text = str(raw).strip().lower()
        for cond, sym in _CONDITION_SYMBOLS.items():
            if text == sym:
                return cond
        return cls(text)


_CONDITION_SYMBOLS: dict[Condition, str] = {
    Condition.LT: "<",
    Condition.GT: ">",
    Condition.EQ: "=",
}
