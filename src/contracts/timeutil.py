"""ISO-8601 helpers shared by the contracts (all stored timestamps are UTC)."""

from __future__ import annotations

from datetime import UTC, datetime


def parse_iso(iso: str) -> datetime:
    """Parse ISO-8601 timestamp to an aware datetime (UTC when naive)."""
    dt = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_ts(dt: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SSZ`` (microseconds kept when present)."""
    dt = dt.astimezone(UTC)
    if dt.microsecond:
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
