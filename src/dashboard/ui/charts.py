"""Білдери Plotly графіків."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from src.dashboard.ui.cards import SEVERITY_COLORS, STATUS_COLORS

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13)

_LAYOUT: dict = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    bargap=0.35,
    height=340,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── power trend ─────────────────────────────────────────────────────────────


def power_trend(
    df: pd.DataFrame,
    *,
    power_threshold: float | None = None,
) -> go.Figure | None:
    """Line chart -- power output over time, one line per panel.

    Points are coloured by status so offline / low readings stand out.
    Returns *None* for an empty frame so the caller can show a placeholder.
    """
    if df is None or df.empty:
        return None

    fig = go.Figure()
    for panel, grp in df.sort_values("observed_at").groupby("panel_id", sort=False):
        fig.add_trace(
            go.Scatter(
                x=grp["observed_at"],
                y=grp["power_out"],
                name=str(panel),
                mode="lines+markers",
                line=dict(width=2),
                marker=dict(
                    size=8,
                    color=[STATUS_COLORS.get(s, "#888") for s in grp["status"]],
                ),
                customdata=grp[["status", "voltage"]],
                hovertemplate=(
                    "%{x|%Y-%m-%d %H:%M}<br>%{y:.2f} W · %{customdata[1]:.1f} V"
                    "<br>%{customdata[0]}<extra>" + str(panel) + "</extra>"
                ),
            )
        )
    if power_threshold is not None:
        fig.add_hline(
            y=power_threshold,
            line_dash="dot",
            line_color=STATUS_COLORS["low"],
            annotation_text=f"low < {power_threshold:g} W",
            annotation_position="top left",
        )
    fig.update_layout(
        **_base(
            title=dict(text="Power Output Trend"),
            xaxis=dict(title="", gridcolor=_GRID_COLOR),
            yaxis=dict(title="W", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig


# ── alerts by severity ──────────────────────────────────────────────────────


def alerts_by_severity_bar(df: pd.DataFrame) -> go.Figure | None:
    if df is None or df.empty:
        return None
    counts = df["severity"].value_counts()
    fig = go.Figure()
    for sev in ("critical", "warning"):
        n = int(counts.get(sev, 0))
        fig.add_trace(
            go.Bar(
                x=[sev.capitalize()],
                y=[n],
                marker_color=SEVERITY_COLORS[sev],
                marker_line_width=0,
                showlegend=False,
                hovertemplate="%{x}: %{y}<extra></extra>",
                text=[str(n)],
                textposition="outside",
            )
        )
    fig.update_layout(
        **_base(
            title=dict(text="Alerts by Severity"),
            yaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False, dtick=1),
            xaxis=dict(title=""),
        )
    )
    return fig
