"""Reading — one classified panel measurement for a single point in time."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.contracts.enums import PanelStatus
from src.contracts.timeutil import format_ts, parse_iso

# CSV column order for reading export, same names as the batch input header
READING_CSV_COLUMNS: list[str] = [
    "id_panel",
    "power",
    "voltage",
    "status",
    "timestamp",
]


@dataclass(frozen=True, slots=True)
class Reading:
    """Immutable record created once per valid input row."""

    reading_id: str         # e.g. "RDG-0001"
    panel_id: str           # e.g. "PV001"
    power_out: float        # W, 0.0 when the raw value was unparseable
    voltage: float          # V, 0.0 when the raw value was unparseable
    status: PanelStatus
    observed_at: datetime   # tz-aware, UTC

    # ── serialisation ─────────────────────────────────────────────────────

    def to_csv_row(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(
            [
                self.panel_id,
                f"{self.power_out:g}",
                f"{self.voltage:g}",
                self.status.value,
                format_ts(self.observed_at),
            ]
        )
        return buf.getvalue().rstrip("\r\n")

    @staticmethod
    def csv_header() -> str:
        return ",".join(READING_CSV_COLUMNS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reading_id": self.reading_id,
            "panel_id": self.panel_id,
            "power_out": self.power_out,
            "voltage": self.voltage,
            "status": self.status.value,
            "observed_at": format_ts(self.observed_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reading:
        return cls(
            reading_id=str(data["reading_id"]),
            panel_id=str(data["panel_id"]),
            power_out=float(data["power_out"]),
            voltage=float(data["voltage"]),
            status=PanelStatus(data["status"]),
            observed_at=parse_iso(data["observed_at"]),
        )
