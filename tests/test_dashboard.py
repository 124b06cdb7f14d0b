"""Тести шару даних дашборду: DataFrame, фільтри, графіки та картки."""

from __future__ import annotations

from types import SimpleNamespace

from src.analyzer.metrics import summarize
from src.contracts.enums import PanelStatus, Severity
from src.dashboard.data_access import (
    ALERT_COLUMNS,
    ALL,
    READING_COLUMNS,
    alerts_frame,
    filter_alerts,
    filter_readings,
    panel_options,
    readings_frame,
)
from src.dashboard.ui.cards import summary_cards
from src.dashboard.ui.charts import alerts_by_severity_bar, power_trend
from src.dashboard.ui.layout import take_new_upload
from tests.conftest import dt_offset, make_alert, make_reading


def _readings():
    return [
        make_reading(reading_id="RDG-0001", panel_id="PV002", observed_at=dt_offset(0)),
        make_reading(reading_id="RDG-0002", panel_id="PV001", power_out=0.0,
                     status=PanelStatus.OFFLINE, observed_at=dt_offset(60)),
        make_reading(reading_id="RDG-0003", panel_id="PV002", power_out=20.0,
                     status=PanelStatus.LOW, observed_at=dt_offset(120)),
    ]


def _alerts():
    return [
        make_alert(alert_id="ALR-0001", panel_id="PV001"),
        make_alert(alert_id="ALR-0002", panel_id="PV002", severity=Severity.WARNING,
                   message="Panel PV002 has low power: 20.00W"),
        make_alert(alert_id="ALR-0003", panel_id="PV001", severity=Severity.WARNING,
                   message="Panel PV001 has low voltage: 150.00V"),
    ]


class TestFrames:
    def test_empty_frames_have_columns(self):
        assert list(readings_frame([]).columns) == READING_COLUMNS
        assert list(alerts_frame([]).columns) == ALERT_COLUMNS

    def test_readings_frame_keeps_batch_order(self):
        df = readings_frame(_readings())
        assert list(df["reading_id"]) == ["RDG-0001", "RDG-0002", "RDG-0003"]
        assert list(df["status"]) == ["normal", "offline", "low"]
        assert str(df["observed_at"].dt.tz) == "UTC"

    def test_alerts_frame(self):
        df = alerts_frame(_alerts())
        assert list(df["severity"]) == ["critical", "warning", "warning"]


class TestFilters:
    def test_panel_options_first_seen_order(self):
        assert panel_options(_readings()) == [ALL, "PV002", "PV001"]
        assert panel_options([]) == [ALL]

    def test_filter_readings_by_panel(self):
        df = filter_readings(readings_frame(_readings()), "PV002")
        assert list(df["reading_id"]) == ["RDG-0001", "RDG-0003"]

    def test_filter_readings_all(self):
        assert len(filter_readings(readings_frame(_readings()))) == 3

    def test_filter_alerts_combined(self):
        df = alerts_frame(_alerts())
        assert list(filter_alerts(df, panel="PV001")["alert_id"]) == ["ALR-0001", "ALR-0003"]
        assert list(filter_alerts(df, severity="warning")["alert_id"]) == ["ALR-0002", "ALR-0003"]
        both = filter_alerts(df, panel="PV001", severity="warning")
        assert list(both["alert_id"]) == ["ALR-0003"]

    def test_filter_unknown_panel_is_empty(self):
        assert filter_alerts(alerts_frame(_alerts()), panel="PV999").empty

    def test_filters_on_empty_frames(self):
        assert filter_readings(readings_frame([]), "PV001").empty
        assert filter_alerts(alerts_frame([]), severity="critical").empty


class TestCharts:
    def test_empty_frames_give_no_figure(self):
        assert power_trend(readings_frame([])) is None
        assert alerts_by_severity_bar(alerts_frame([])) is None

    def test_power_trend_one_line_per_panel(self):
        fig = power_trend(readings_frame(_readings()), power_threshold=50.0)
        assert sorted(t.name for t in fig.data) == ["PV001", "PV002"]

    def test_severity_bar_counts(self):
        fig = alerts_by_severity_bar(alerts_frame(_alerts()))
        assert [tuple(t.y) for t in fig.data] == [(1,), (2,)]


class TestCards:
    def test_four_cards(self):
        cards = summary_cards(summarize(_readings(), _alerts()))
        assert len(cards) == 4
        assert "Offline Panels" in cards[2]
        assert ">1<" in cards[2]


class TestSoundUpload:
    def test_same_file_applied_once(self):
        session: dict = {}
        upload = SimpleNamespace(file_id="f-1", name="siren.mp3")
        assert take_new_upload(session, "audio_applied_critical", upload) is True
        # reruns after "Reset to default" still see the same uploaded file
        assert take_new_upload(session, "audio_applied_critical", upload) is False
        assert take_new_upload(session, "audio_applied_critical", upload) is False

    def test_new_file_applied(self):
        session: dict = {}
        take_new_upload(session, "k", SimpleNamespace(file_id="f-1", name="a.wav"))
        assert take_new_upload(session, "k", SimpleNamespace(file_id="f-2", name="a.wav")) is True

    def test_no_upload(self):
        session: dict = {}
        assert take_new_upload(session, "k", None) is False
        assert session == {}

    def test_falls_back_to_name(self):
        session: dict = {}
        assert take_new_upload(session, "k", SimpleNamespace(name="beep.ogg")) is True
        assert take_new_upload(session, "k", SimpleNamespace(name="beep.ogg")) is False
