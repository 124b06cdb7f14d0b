"""Відображення таблиць показань та оповіщень."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

from src.dashboard.data_access import SEVERITY_ORDER, STATUS_ORDER

_READING_LABELS = {
    "panel_id": "Panel",
    "power_out": "Power (W)",
    "voltage": "Voltage (V)",
    "status": "Status",
    "observed_at": "Time",
}

_ALERT_LABELS = {
    "panel_id": "Panel",
    "message": "Message",
    "severity": "Severity",
    "occurred_at": "Time",
}

_COL_CONFIG = {
    "Time": colcfg.DatetimeColumn("Time", format="MMM DD, YYYY  HH:mm:ss"),
    "Power (W)": colcfg.NumberColumn("Power (W)", format="%.2f"),
    "Voltage (V)": colcfg.NumberColumn("Voltage (V)", format="%.2f"),
}


def render_readings_table(df: pd.DataFrame) -> None:
    """Render the readings of the current batch (batch order).

    Sorting by status is one header click away; the default keeps the
    input order so rows line up with the uploaded file.
    """
    if df.empty:
        st.info("No readings to display. Upload or paste a batch first.")
        return

    cols = [c for c in _READING_LABELS if c in df.columns]
    view = df[cols].rename(columns=_READING_LABELS)
    st.caption(
        f"Readings: {len(view)} | "
        + ", ".join(
            f"{s}={int((df['status'] == s).sum())}"
            for s in sorted(STATUS_ORDER, key=STATUS_ORDER.get)
        )
    )
    st.dataframe(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 420),
        column_config=_COL_CONFIG,
        key="tbl_readings",
    )


def render_alert_table(df: pd.DataFrame) -> str | None:
    """Render alerts (aggregator order) and return the selected alert id.

    Single-row selection drives the details panel and the dismiss button.
    """
    if df.empty:
        st.info("No alerts to display.")
        return None

    view = df[["alert_id", *_ALERT_LABELS]].rename(columns=_ALERT_LABELS)
    view["_sev_ord"] = view["Severity"].map(SEVERITY_ORDER).fillna(99)
    st.caption(
        f"Alerts: {len(view)} | critical={int((view['_sev_ord'] == 0).sum())}, "
        f"warning={int((view['_sev_ord'] == 1).sum())}"
    )
    view = view.drop(columns=["_sev_ord"])

    event = st.dataframe(
        view.drop(columns=["alert_id"]),
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 420),
        column_config=_COL_CONFIG,
        on_select="rerun",
        selection_mode="single-row",
        key="tbl_alerts",
    )
    rows = event.selection.rows if event is not None else []
    if not rows:
        return None
    return str(view.iloc[rows[0]]["alert_id"])
