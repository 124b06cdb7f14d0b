"""Головний файл дашборду SolarWatch на Streamlit.

Run with: ``streamlit run src/dashboard/app.py``
"""

from __future__ import annotations

from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="SolarWatch — Solar PV Security Alarm",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from src.dashboard.data_access import (  # noqa: E402
    alerts_frame,
    filter_alerts,
    filter_readings,
    readings_frame,
)
from src.dashboard.ui.cards import summary_cards  # noqa: E402
from src.dashboard.ui.charts import (  # noqa: E402
    CHART_CONFIG,
    alerts_by_severity_bar,
    power_trend,
)
from src.dashboard.ui.layout import (  # noqa: E402
    play_pending_sounds,
    render_header,
    render_sidebar,
)
from src.dashboard.ui.rules_form import render_rule_form, render_rule_list  # noqa: E402
from src.dashboard.ui.state import get_controller, init_state  # noqa: E402
from src.dashboard.ui.tables import render_alert_table, render_readings_table  # noqa: E402

# ── initialise session state ────────────────────────────────────────────────

init_state()
ctl = get_controller()

# ── sidebar / header ────────────────────────────────────────────────────────

sidebar = render_sidebar(ctl)
render_header()
play_pending_sounds(ctl)

# ── KPI CARDS ───────────────────────────────────────────────────────────────

cols = st.columns(4)
for col, card in zip(cols, summary_cards(ctl.summary())):
    with col:
        st.markdown(card, unsafe_allow_html=True)

df_readings = filter_readings(readings_frame(ctl.readings), sidebar.panel)
df_alerts = filter_alerts(
    alerts_frame(ctl.alerts),
    panel=sidebar.panel,
    severity=sidebar.severity,
)

# ── CHARTS ──────────────────────────────────────────────────────────────────

st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
c1, c2 = st.columns([3, 1])
with c1:
    fig = power_trend(df_readings, power_threshold=ctl.thresholds.power)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG, key="chart_power")
    else:
        st.markdown(
            '<div class="no-data-box"><strong>Power Output Trend</strong><br>'
            "No readings yet.</div>",
            unsafe_allow_html=True,
        )
with c2:
    fig = alerts_by_severity_bar(df_alerts)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG, key="chart_sev")

# ── ALERTS ──────────────────────────────────────────────────────────────────

st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
st.markdown('<p class="section-label">Alerts</p>', unsafe_allow_html=True)

selected_id = render_alert_table(df_alerts)
a1, a2 = st.columns([1, 5])
with a1:
    if selected_id and st.button("Dismiss selected", type="primary"):
        ctl.dismiss_alert(selected_id)
        st.rerun()
with a2:
    st.download_button(
        "Export alerts (CSV)",
        data=ctl.export_alerts_csv(),
        file_name="alerts_export.csv",
        mime="text/csv",
        disabled=not ctl.alerts,
    )

if selected_id:
    alert = next((a for a in ctl.alerts if a.alert_id == selected_id), None)
    if alert is not None:
        with st.expander(f"Alert details — {alert.panel_id}", expanded=True):
            st.markdown(
                f"**Message:** {alert.message}  \n"
                f"**Severity:** {alert.severity.value}  \n"
                f"**When:** {alert.occurred_at:%Y-%m-%d %H:%M:%S} UTC"
            )

# ── READINGS ────────────────────────────────────────────────────────────────

st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
st.markdown('<p class="section-label">Panel Readings</p>', unsafe_allow_html=True)
render_readings_table(df_readings)

# ── RULES ───────────────────────────────────────────────────────────────────

st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
st.markdown('<p class="section-label">Custom Rules</p>', unsafe_allow_html=True)
st.caption("Rule changes apply from the next analysed batch.")
render_rule_form(ctl)
render_rule_list(ctl)
