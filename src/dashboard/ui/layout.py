"""Page layout — sidebar controls and main-area scaffolding.

``render_sidebar`` draws the batch input, thresholds, filters and sound
settings, and applies the operator's actions to the controller.
``render_header`` draws the top title bar.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

import streamlit as st

from src.contracts.enums import Severity
from src.contracts.errors import AudioAssetError, EmptyBatchError
from src.dashboard.data_access import ALL, panel_options
from src.state.audio import default_tone_wav, make_audio_asset
from src.state.controller import AppController

log = logging.getLogger(__name__)


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    panel: str
    severity: str


# ── header ──────────────────────────────────────────────────────────────────


def render_header() -> None:
    st.markdown(
        '<h1 class="page-title">Solar PV Security Alarm System</h1>'
        '<p class="page-subtitle">'
        "Panel health, theft detection and custom threshold alerts."
        "</p>",
        unsafe_allow_html=True,
    )


# ── sidebar ─────────────────────────────────────────────────────────────────


def _submit(ctl: AppController, text: str) -> None:
    try:
        result = ctl.submit_text(text)
    except EmptyBatchError as exc:
        st.warning(str(exc))
        return
    st.success(
        f"{len(result.readings)} readings, {len(result.alerts)} alerts"
        + (f" ({result.rejected} rows skipped)" if result.rejected else "")
    )


def take_new_upload(session: MutableMapping[str, Any], key: str, upload: Any) -> bool:
    """True once per distinct uploaded file remembered under *key*.

    The uploader keeps its file across reruns, so without this a reset sound
    would be re-attached on the next render.
    """
    if upload is None:
        return False
    file_id = getattr(upload, "file_id", None) or upload.name
    if session.get(key) == file_id:
        return False
    session[key] = file_id
    return True


def _audio_controls(ctl: AppController, severity: Severity, default_label: str) -> None:
    asset = ctl.audio_for(severity)
    st.caption(f"{severity.value.capitalize()} sound: {asset.name if asset else default_label}")
    upload = st.file_uploader(
        f"{severity.value.capitalize()} sound",
        type=["mp3", "wav", "ogg"],
        key=f"audio_{severity.value}",
        label_visibility="collapsed",
    )
    if take_new_upload(st.session_state, f"audio_applied_{severity.value}", upload):
        try:
            ctl.set_audio(severity, make_audio_asset(upload.name, upload.type, upload.getvalue()))
        except AudioAssetError as exc:
            st.error(str(exc))
    if asset is not None and st.button("Reset to default", key=f"clear_audio_{severity.value}"):
        ctl.clear_audio(severity)
        st.rerun()


def render_sidebar(ctl: AppController) -> SidebarState:
    """Draw sidebar controls and return current selections."""

    with st.sidebar:
        st.markdown('<p class="sidebar-brand">SolarWatch</p>', unsafe_allow_html=True)
        st.caption("Panel telemetry analyzer")
        st.divider()

        # -- thresholds --
        st.markdown("##### Thresholds")
        power = st.number_input(
            "Power threshold (W)",
            min_value=0.0,
            value=float(ctl.thresholds.power),
            step=5.0,
        )
        voltage = st.number_input(
            "Voltage threshold (V)",
            min_value=0.0,
            value=float(ctl.thresholds.voltage),
            step=5.0,
        )
        ctl.set_thresholds(power=power, voltage=voltage)
        st.caption("Applies to the next analysed batch.")

        st.divider()

        # -- batch input --
        st.markdown("##### Batch input")
        upload = st.file_uploader("CSV file", type=["csv", "txt"], key="batch_file")
        if upload is not None and st.button("Analyze file", type="primary"):
            _submit(ctl, upload.getvalue().decode("utf-8-sig", errors="replace"))

        text = st.text_area(
            "Paste CSV",
            key="paste_text",
            height=140,
            placeholder="id_panel,power,voltage,timestamp\nPV001,0,220,2026-03-01T10:00:00Z",
        )
        if st.button("Analyze pasted data"):
            _submit(ctl, text)

        st.divider()

        # -- filters --
        st.markdown("##### Filters")
        panels = panel_options(ctl.readings)
        if st.session_state.get("selected_panel") not in panels:
            st.session_state["selected_panel"] = ALL
        panel = st.selectbox("Panel", panels, key="selected_panel") if len(panels) > 1 else ALL
        severity = st.selectbox(
            "Severity",
            [ALL, *(s.value for s in Severity)],
            key="selected_severity",
        )

        st.divider()

        # -- sounds --
        with st.expander("Alert sounds"):
            _audio_controls(ctl, Severity.CRITICAL, "Default (880 Hz)")
            _audio_controls(ctl, Severity.WARNING, "Default (440 Hz)")

        st.divider()
        if st.button("Clear all data", type="secondary"):
            ctl.clear()
            st.rerun()

    return SidebarState(panel=panel, severity=severity)


# ── sounds ──────────────────────────────────────────────────────────────────


def play_pending_sounds(ctl: AppController) -> None:
    """Play at most one sound per severity for alerts raised since last render."""
    pending = st.session_state.get("pending_sounds", [])
    if not pending:
        return
    st.session_state["pending_sounds"] = []
    for severity in (Severity.CRITICAL, Severity.WARNING):
        if severity not in pending:
            continue
        asset = ctl.audio_for(severity)
        try:
            if asset is not None:
                st.audio(asset.data, format=asset.mime, autoplay=True)
            else:
                st.audio(default_tone_wav(severity), format="audio/wav", autoplay=True)
        except Exception:
            # playback is best-effort
            log.exception("Failed to play %s sound", severity.value)
