"""Statistics Engine — batch power baseline for anomaly scoring.

The baseline is computed over power values that are finite and strictly
positive, so offline (zero) readings from theft events do not drag the mean
down. Standard deviation is the population one (divide by N).

A reading is anomalous when::

    std_dev > 0  and  |power_out - mean| > ANOMALY_SIGMA * std_dev
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from src.contracts.reading import Reading

log = logging.getLogger(__name__)

ANOMALY_SIGMA = 2.0


@dataclass(frozen=True, slots=True)
class PowerStats:
    mean: float = 0.0
    std_dev: float = 0.0
    sample_size: int = 0

    @property
    def detection_enabled(self) -> bool:
        return self.sample_size > 0 and self.std_dev > 0


def valid_powers(readings: Iterable[Reading]) -> list[float]:
    return [r.power_out for r in readings if math.isfinite(r.power_out) and r.power_out > 0]


def compute_power_stats(readings: Iterable[Reading]) -> PowerStats:
    """Mean and population std-dev of the valid power outputs of a batch."""
    values = valid_powers(readings)
    if not values:
        log.info("No valid power values, anomaly detection skipped for this batch")
        return PowerStats()

    n = len(values)
    mean = sum(values) / n
    variance = sum((v - mean) ** 2 for v in values) / n
    stats = PowerStats(mean=mean, std_dev=math.sqrt(variance), sample_size=n)
    log.debug("Power baseline: mean=%.2f std=%.2f n=%d", stats.mean, stats.std_dev, n)
    return stats


def is_anomalous(power_out: float, stats: PowerStats) -> bool:
    """Two-sigma check of a single power value against the batch baseline."""
    if not stats.detection_enabled:
        return False
    return abs(power_out - stats.mean) > ANOMALY_SIGMA * stats.std_dev
