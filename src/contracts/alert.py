"""Модель оповіщення (Alert)."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.contracts.enums import Severity
from src.contracts.timeutil import format_ts, parse_iso

# Public alert export format
ALERT_CSV_COLUMNS: list[str] = [
    "id_panel",
    "alertMessage",
    "severityLevel",
    "when",
]


@dataclass(frozen=True, slots=True)
class Alert:
    """Оповіщення, згенероване агрегатором для одного Reading."""

    alert_id: str  # e.g. "ALR-0001"
    panel_id: str
    message: str
    severity: Severity
    occurred_at: datetime  # copied from the triggering Reading

    def to_csv_row(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(
            [self.panel_id, self.message, self.severity.value, format_ts(self.occurred_at)]
        )
        return buf.getvalue().rstrip("\r\n")

    @staticmethod
    def csv_header() -> str:
        return ",".join(ALERT_CSV_COLUMNS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "alert_id": self.alert_id,
            "panel_id": self.panel_id,
            "message": self.message,
            "severity": self.severity.value,
            "occurred_at": format_ts(self.occurred_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Alert:
        return cls(
            alert_id=str(data["alert_id"]),
            panel_id=str(data["panel_id"]),
            message=str(data["message"]),
            severity=Severity(data["severity"]),
            occurred_at=parse_iso(data["occurred_at"]),
        )
