"""Record parser: raw tabular rows → Reading records.

Each row is a mapping of column name → raw string with at least the
``id_panel``, ``power``, ``voltage`` and ``timestamp`` columns.

  - a row missing any of those (absent, None or blank) is dropped
  - power / voltage parse as floats; a trailing unit ("231.4V") is accepted,
    anything else unparseable becomes 0.0 (NaN for classification, so the
    panel shows up as offline)
  - timestamps parse as ISO-8601 or one of ``_TS_PATTERNS``; naive values are
    read in the batch timezone, unparseable ones become the processing time

Row order is preserved.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo

from src.analyzer.classifier import DEFAULT_POWER_THRESHOLD, classify
from src.contracts.reading import Reading

log = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("id_panel", "power", "voltage", "timestamp")

# ── Timestamp strptime patterns (tried after ISO-8601) ──────────────────────
_TS_PATTERNS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%b %d %Y %H:%M:%S",
)

# Numeric part with an optional unit suffix: "231.4V" → ("231.4", "V")
_NUM_UNIT_RE = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-zA-Z/%]*)$")


@dataclass(slots=True)
class ParseResult:
    """Readings produced from one batch plus the count of dropped rows."""

    readings: list[Reading] = field(default_factory=list)
    rejected: int = 0

    @property
    def total_rows(self) -> int:
        return len(self.readings) + self.rejected


# ── Field helpers ────────────────────────────────────────────────────────────


def _field(row: Mapping[str, str | None], name: str) -> str | None:
    raw = row.get(name)
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_number(raw: str) -> float:
    """Parse a numeric field. Returns NaN when the value is not a finite number.

    Only plain decimal notation is accepted: ``inf``, ``nan`` and ``1_000``
    count as unparseable.
    """
    m = _NUM_UNIT_RE.match(raw.strip())
    if not m:
        return math.nan
    value = float(m.group(1))
    return value if math.isfinite(value) else math.nan


def parse_timestamp(raw: str, tz: tzinfo = UTC) -> datetime | None:
    """Parse a timestamp to an aware UTC datetime, or None if unparseable."""
    text = raw.strip()
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        dt = None
        for pattern in _TS_PATTERNS:
            try:
                dt = datetime.strptime(text, pattern)
                break
            except ValueError:
                continue
        if dt is None:
            log.debug("Timestamp parse error: %r", raw)
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(UTC)


# ── Main parse functions ─────────────────────────────────────────────────────


def parse_row(
    row: Mapping[str, str | None],
    reading_id: str,
    *,
    power_threshold: float = DEFAULT_POWER_THRESHOLD,
    tz: tzinfo = UTC,
    now: datetime | None = None,
) -> Reading | None:
    """Parse one raw row. Returns None when a required field is missing."""
    values = {name: _field(row, name) for name in REQUIRED_COLUMNS}
    missing = [name for name, v in values.items() if v is None]
    if missing:
        log.debug("Row rejected, missing %s: %r", ",".join(missing), dict(row))
        return None

    power = parse_number(values["power"])
    voltage = parse_number(values["voltage"])
    status = classify(power, power_threshold)

    observed_at = parse_timestamp(values["timestamp"], tz)
    if observed_at is None:
        observed_at = now or datetime.now(UTC)

    return Reading(
        reading_id=reading_id,
        panel_id=values["id_panel"],
        power_out=0.0 if math.isnan(power) else power,
        voltage=0.0 if math.isnan(voltage) else voltage,
        status=status,
        observed_at=observed_at,
    )


def parse_rows(
    rows: Iterable[Mapping[str, str | None]],
    *,
    power_threshold: float = DEFAULT_POWER_THRESHOLD,
    tz: tzinfo = UTC,
    now: datetime | None = None,
) -> ParseResult:
    """Parse an ordered batch of raw rows into Readings.

    ``now`` is resolved once so every unparseable timestamp in the batch
    gets the same processing time.
    """
    now = now or datetime.now(UTC)
    result = ParseResult()
    counter = 0

    for row in rows:
        reading = parse_row(
            row,
            f"RDG-{counter + 1:04d}",
            power_threshold=power_threshold,
            tz=tz,
            now=now,
        )
        if reading is None:
            result.rejected += 1
            continue
        counter += 1
        result.readings.append(reading)

    log.info(
        "Parsed %d readings from %d rows (%d rejected)",
        len(result.readings),
        result.total_rows,
        result.rejected,
    )
    return result
