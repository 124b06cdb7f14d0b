"""Ініціалізація стану сесії та контролера застосунку."""

from __future__ import annotations

import os

import streamlit as st

from src.analyzer.notifier import AlertNotifier
from src.shared.config_loader import Settings, load_settings
from src.state.controller import AppController
from src.state.storage import JsonStateStorage

_SETTINGS_PATH = os.environ.get("SOLARWATCH_SETTINGS", "config/settings.yaml")

_DEFAULTS: dict[str, object] = {
    "selected_panel": "All",
    "selected_severity": "All",
    "paste_text": "",
    "pending_sounds": [],
}


def init_state() -> None:
    """Заповнює st.session_state значеннями за замовчуванням."""
    for key, value in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = list(value) if isinstance(value, list) else value


def _queue_sound(alert) -> None:
    # played once on the next render, see layout.play_pending_sounds
    st.session_state.setdefault("pending_sounds", []).append(alert.severity)


def get_controller() -> AppController:
    """Один контролер на сесію; стан читається з JSON при старті."""
    if "controller" not in st.session_state:
        settings = (
            load_settings(_SETTINGS_PATH) if os.path.exists(_SETTINGS_PATH) else Settings()
        )
        notifier = AlertNotifier()
        notifier.on_critical(_queue_sound)
        notifier.on_warning(_queue_sound)
        st.session_state["controller"] = AppController(
            settings=settings,
            storage=JsonStateStorage(settings.state_path),
            notifier=notifier,
        )
    return st.session_state["controller"]
