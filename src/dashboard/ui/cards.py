"""Білдери HTML KPI карток."""

from __future__ import annotations

from src.analyzer.metrics import BatchSummary

# ── canonical status / severity colours ─────────────────────────────────────

STATUS_COLORS: dict[str, str] = {
    "normal": "#22c55e",
    "low": "#f59e0b",
    "offline": "#ef4444",
}

SEVERITY_COLORS: dict[str, str] = {
    "warning": "#f59e0b",
    "critical": "#ef4444",
}


def kpi_card(title: str, value: str, label: str, accent: str = "") -> str:
    """Побудова однієї KPI картки."""
    accent_style = f' style="border-top-color:{accent}"' if accent else ""
    return (
        f'<div class="kpi-card"{accent_style}>'
        f'  <div class="kpi-card-header">{title}</div>'
        f'  <div class="kpi-card-body">'
        f'    <div class="kpi-metric-main">{value}</div>'
        f'    <div class="kpi-metric-label">{label}</div>'
        f"  </div>"
        f"</div>"
    )


def summary_cards(summary: BatchSummary) -> list[str]:
    """Чотири картки дашборду: панелі, активні, offline, середня потужність."""
    crit = summary.alerts_by_severity.get("critical", 0)
    return [
        kpi_card("Total Panels", str(summary.total_readings), f"{summary.panels} distinct ids"),
        kpi_card(
            "Active Panels",
            str(summary.active),
            f"{summary.low} low power",
            STATUS_COLORS["normal"],
        ),
        kpi_card(
            "Offline Panels",
            str(summary.offline),
            f"{crit} critical alerts",
            STATUS_COLORS["offline"],
        ),
        kpi_card("Avg Power", f"{summary.avg_power_w:.2f} W", f"{summary.alerts_total} alerts"),
    ]
