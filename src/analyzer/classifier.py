"""Classifier — panel health status from numeric thresholds."""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.contracts.enums import PanelStatus

DEFAULT_POWER_THRESHOLD = 50.0
DEFAULT_VOLTAGE_THRESHOLD = 200.0


@dataclass(frozen=True, slots=True)
class Thresholds:
    """Operator-set, process-wide thresholds applied uniformly to a batch."""

    power: float = DEFAULT_POWER_THRESHOLD  # W
    voltage: float = DEFAULT_VOLTAGE_THRESHOLD  # V


def classify(power_out: float, power_threshold: float = DEFAULT_POWER_THRESHOLD) -> PanelStatus:
    """Return the health status for a single power reading.

    offline — power is NaN (absent/unparseable) or exactly 0
    low     — power below *power_threshold*
    normal  — otherwise
    """
    if math.isnan(power_out) or power_out == 0:
        return PanelStatus.OFFLINE
    if power_out < power_threshold:
        return PanelStatus.LOW
    return PanelStatus.NORMAL
