"""Data contracts — canonical data structures shared by all modules."""

from src.contracts.alert import Alert
from src.contracts.enums import Condition, Metric, PanelStatus, Severity
from src.contracts.errors import (
    AudioAssetError,
    EmptyBatchError,
    RuleValidationError,
    SolarWatchError,
)
from src.contracts.reading import Reading
from src.contracts.rule import Rule, RuleDraft

__all__ = [
    "Alert",
    "AudioAssetError",
    "Condition",
    "EmptyBatchError",
    "Metric",
    "PanelStatus",
    "Reading",
    "Rule",
    "RuleDraft",
    "RuleValidationError",
    "Severity",
    "SolarWatchError",
]
