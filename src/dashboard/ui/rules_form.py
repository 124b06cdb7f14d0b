"""Форма правил: створення, редагування, видалення."""

from __future__ import annotations

import streamlit as st

from src.contracts.enums import Condition, Metric, Severity
from src.contracts.errors import RuleValidationError
from src.contracts.rule import RuleDraft, format_threshold
from src.rulebook.store import StoreState
from src.state.controller import AppController

_CONDITIONS = [c.value for c in Condition]


def render_rule_form(ctl: AppController) -> None:
    """Draw the rule form bound to the controller's rule store."""
    store = ctl.rule_store
    if store.state is StoreState.IDLE:
        ctl.start_create_rule()
    draft = store.draft or RuleDraft()
    editing = store.editing_id

    st.markdown(f"##### {'Edit rule ' + editing if editing else 'New rule'}")
    with st.form("rule_form", clear_on_submit=False):
        c1, c2, c3, c4 = st.columns(4)
        metric = c1.selectbox(
            "Metric",
            [m.value for m in Metric],
            index=[m for m in Metric].index(draft.metric),
        )
        condition = c2.selectbox(
            "Condition",
            _CONDITIONS,
            index=_CONDITIONS.index(draft.condition.value),
            format_func=lambda c: Condition(c).symbol,
        )
        threshold = c3.text_input("Threshold", value=str(draft.threshold))
        severity = c4.selectbox(
            "Severity",
            [s.value for s in Severity],
            index=[s for s in Severity].index(draft.severity),
        )
        message = st.text_input("Message", value=draft.message)
        b1, b2 = st.columns(2)
        submitted = b1.form_submit_button("Update rule" if editing else "Add rule", type="primary")
        cancelled = b2.form_submit_button("Cancel")

    if cancelled:
        ctl.cancel_rule_edit()
        st.rerun()
    if submitted:
        form = {
            "metric": metric,
            "condition": condition,
            "threshold": threshold,
            "severity": severity,
            "message": message,
        }
        try:
            ctl.save_rule(RuleDraft.from_form(form))
        except RuleValidationError as exc:
            st.error(f"Please enter a valid number for threshold and a message. ({exc})")
        else:
            st.rerun()


def render_rule_list(ctl: AppController) -> None:
    if not ctl.rules:
        st.caption("No custom rules defined.")
        return
    for rule in ctl.rules:
        c1, c2, c3 = st.columns([6, 1, 1])
        c1.markdown(
            f"**{rule.rule_id}** · `{rule.metric.value} {rule.condition.symbol} "
            f"{format_threshold(rule.threshold)}` · *{rule.severity.value}* · "
            f"{rule.message or rule.describe()}"
        )
        if c2.button("Edit", key=f"edit_{rule.rule_id}"):
            ctl.start_edit_rule(rule.rule_id)
            st.rerun()
        if c3.button("Delete", key=f"del_{rule.rule_id}"):
            ctl.delete_rule(rule.rule_id)
            st.rerun()
