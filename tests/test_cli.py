"""Tests for settings loading and the ``solarwatch`` command line."""

from __future__ import annotations

import csv
import json

import pytest

from src.analyzer import cli
from src.analyzer.classifier import Thresholds
from src.shared.config_loader import Settings, load_settings, load_yaml, settings_from_config


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    # keep pytest's own log handlers in place
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: None)


@pytest.fixture(autouse=True)
def _in_tmp_dir(monkeypatch, tmp_path):
    # default output paths (out/...) land in the test directory
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def batch_file(tmp_path, scenario_csv):
    path = tmp_path / "batch.csv"
    path.write_text(scenario_csv, encoding="utf-8")
    return path


def _run(settings_yaml, *args) -> int:
    return cli.main(["--config-dir", str(settings_yaml), *args])


# ═══════════════════════════════════════════════════════════════════════════
#  Settings
# ═══════════════════════════════════════════════════════════════════════════


class TestSettings:
    def test_defaults(self):
        s = load_settings()
        assert s.thresholds == Thresholds(50.0, 200.0)
        assert s.eq_tolerance is None
        assert s.timezone == "UTC"

    def test_from_file(self, settings_yaml, tmp_path):
        s = load_settings(settings_yaml / "settings.yaml")
        assert s.thresholds.power == 50.0
        assert s.state_path == str(tmp_path / "state.json")

    def test_partial_config_falls_back(self):
        s = settings_from_config({"thresholds": {"voltage": 210}, "rules": {"eq_tolerance": 0.5}})
        assert s.thresholds == Thresholds(power=50.0, voltage=210.0)
        assert s.eq_tolerance == 0.5

    def test_overrides(self):
        s = Settings().with_overrides(power_threshold=75.0, state_path="x.json")
        assert s.thresholds == Thresholds(power=75.0, voltage=200.0)
        assert s.state_path == "x.json"
        assert Settings().with_overrides() == Settings()

    def test_missing_yaml_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "absent.yaml")

    def test_empty_yaml_is_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_yaml(path) == {}


# ═══════════════════════════════════════════════════════════════════════════
#  analyze / export / clear
# ═══════════════════════════════════════════════════════════════════════════


class TestAnalyzeCommand:
    def test_writes_alerts_and_report(self, settings_yaml, batch_file, tmp_path, capsys):
        out = tmp_path / "out" / "alerts.csv"
        report = tmp_path / "out" / "report.txt"
        code = _run(settings_yaml, "analyze", "--input", str(batch_file),
                    "--out", str(out), "--report", str(report))
        assert code == 0
        with out.open(encoding="utf-8") as fh:
            rows = list(csv.DictReader(fh))
        assert [r["severityLevel"] for r in rows] == ["critical", "warning", "warning"]
        assert "Readings:         3" in report.read_text(encoding="utf-8")
        assert "3 readings" in capsys.readouterr().out
        summary = (tmp_path / "out" / "summary.csv").read_text(encoding="utf-8").splitlines()
        assert summary[0].startswith("total_readings,panels,active,low,offline")
        assert summary[1] == "3,1,1,1,1,176.67,3,1,2"
        state = json.loads((tmp_path / "state.json").read_text(encoding="utf-8"))
        assert len(state["alerts"]) == 3

    def test_threshold_flags(self, settings_yaml, batch_file, tmp_path):
        out = tmp_path / "alerts.csv"
        _run(settings_yaml, "--no-state", "analyze", "--input", str(batch_file),
             "--voltage-threshold", "100", "--out", str(out),
             "--report", str(tmp_path / "r.txt"))
        assert len(out.read_text(encoding="utf-8").splitlines()) == 3

    def test_no_state_leaves_no_file(self, settings_yaml, batch_file, tmp_path):
        _run(settings_yaml, "--no-state", "analyze", "--input", str(batch_file),
             "--out", str(tmp_path / "a.csv"), "--report", str(tmp_path / "r.txt"))
        assert not (tmp_path / "state.json").exists()

    def test_empty_input_exit_code(self, settings_yaml, tmp_path, capsys):
        empty = tmp_path / "empty.csv"
        empty.write_text("\n  \n", encoding="utf-8")
        code = _run(settings_yaml, "analyze", "--input", str(empty),
                    "--out", str(tmp_path / "a.csv"), "--report", str(tmp_path / "r.txt"))
        assert code == 2
        assert "Please provide CSV data" in capsys.readouterr().err
        assert not (tmp_path / "a.csv").exists()

    def test_export_and_clear(self, settings_yaml, batch_file, tmp_path, capsys):
        _run(settings_yaml, "analyze", "--input", str(batch_file),
             "--out", str(tmp_path / "a.csv"), "--report", str(tmp_path / "r.txt"))
        export = tmp_path / "export.csv"
        assert _run(settings_yaml, "export", "--out", str(export)) == 0
        assert len(export.read_text(encoding="utf-8").splitlines()) == 4

        assert _run(settings_yaml, "clear") == 0
        assert not (tmp_path / "state.json").exists()
        _run(settings_yaml, "export", "--out", str(export))
        assert export.read_text(encoding="utf-8").splitlines() == [
            "id_panel,alertMessage,severityLevel,when"
        ]

    def test_missing_settings_uses_defaults(self, tmp_path, batch_file):
        code = cli.main([
            "--config-dir", str(tmp_path / "nowhere"),
            "--state", str(tmp_path / "s.json"),
            "analyze", "--input", str(batch_file),
            "--out", str(tmp_path / "a.csv"), "--report", str(tmp_path / "r.txt"),
        ])
        assert code == 0
        assert (tmp_path / "s.json").exists()


# ═══════════════════════════════════════════════════════════════════════════
#  rules
# ═══════════════════════════════════════════════════════════════════════════


class TestRulesCommand:
    def test_add_list_delete(self, settings_yaml, capsys):
        assert _run(settings_yaml, "rules", "add", "--metric", "power", "--condition", "<",
                    "--threshold", "100", "--severity", "critical",
                    "--message", "Output collapsed") == 0
        assert "Saved RULE-001" in capsys.readouterr().out

        _run(settings_yaml, "rules", "list")
        listing = capsys.readouterr().out
        assert "RULE-001  power < 100  [critical]  Output collapsed" in listing

        assert _run(settings_yaml, "rules", "delete", "RULE-001") == 0
        _run(settings_yaml, "rules", "delete", "RULE-001")
        assert "not found" in capsys.readouterr().out
        _run(settings_yaml, "rules", "list")
        assert "No rules defined." in capsys.readouterr().out

    def test_edit_keeps_other_fields(self, settings_yaml, capsys):
        _run(settings_yaml, "rules", "add", "--metric", "voltage", "--condition", "gt",
             "--threshold", "260", "--message", "Overvoltage")
        assert _run(settings_yaml, "rules", "edit", "RULE-001", "--threshold", "250") == 0
        capsys.readouterr()
        _run(settings_yaml, "rules", "list")
        assert "RULE-001  voltage > 250  [warning]  Overvoltage" in capsys.readouterr().out

    def test_edit_unknown(self, settings_yaml):
        assert _run(settings_yaml, "rules", "edit", "RULE-404", "--threshold", "1") == 1

    def test_invalid_rule(self, settings_yaml, capsys):
        code = _run(settings_yaml, "rules", "add", "--threshold", "lots", "--message", "x")
        assert code == 2
        assert "Invalid rule" in capsys.readouterr().err

    def test_import_presets(self, settings_yaml, tmp_path, capsys):
        presets = tmp_path / "rules.yaml"
        presets.write_text(
            "rules:\n"
            "  - {metric: power, condition: lt, threshold: 10, message: collapsed}\n"
            "  - {metric: voltage, condition: '>', threshold: 260, message: over}\n",
            encoding="utf-8",
        )
        assert _run(settings_yaml, "rules", "import", str(presets)) == 0
        assert "Imported 2 rules." in capsys.readouterr().out

    def test_rules_apply_to_analysis(self, settings_yaml, batch_file, tmp_path):
        _run(settings_yaml, "rules", "add", "--threshold", "100", "--severity", "critical",
             "--message", "Power below 100 W")
        out = tmp_path / "a.csv"
        _run(settings_yaml, "analyze", "--input", str(batch_file),
             "--out", str(out), "--report", str(tmp_path / "r.txt"))
        assert out.read_text(encoding="utf-8").count("Power below 100 W") == 2
