"""Exceptions surfaced to callers of the SolarWatch core.

Only two situations are rejected explicitly: an empty batch submission and
an invalid rule draft. Everything else is recovered locally.
"""

from __future__ import annotations


class SolarWatchError(Exception):
    """Base class for all SolarWatch errors."""


class EmptyBatchError(SolarWatchError, ValueError):
    """Batch text is empty or whitespace-only."""

    def __init__(self, message: str = "Please provide CSV data to analyze.") -> None:
        super().__init__(message)


class RuleValidationError(SolarWatchError, ValueError):
    """Rule draft failed validation; the draft stays in edit."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class AudioAssetError(SolarWatchError, ValueError):
    """Uploaded alert sound is not an acceptable audio file."""
