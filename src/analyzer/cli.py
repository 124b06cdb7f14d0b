"""CLI entry-point for the SolarWatch analyzer.

Usage examples
--------------
# Analyse a batch, write alerts CSV + summary, keep state in out/state.json:
python -m src.analyzer analyze --input data/sample_readings.csv

# Manage user rules (stored in the same state file):
python -m src.analyzer rules add --metric power --condition lt --threshold 100 \
    --severity critical --message "Output collapsed"
python -m src.analyzer rules list
python -m src.analyzer rules delete RULE-001

# Export the current alert list:
python -m src.analyzer export --out out/alerts_export.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from src.analyzer.notifier import AlertNotifier
from src.analyzer.reporter import (
    atomic_write,
    write_alerts_csv,
    write_summary_csv,
    write_summary_txt,
)
from src.contracts.alert import Alert
from src.contracts.errors import EmptyBatchError, RuleValidationError
from src.contracts.rule import RuleDraft, format_threshold
from src.rulebook.presets import load_rules_yaml
from src.shared.config_loader import Settings, load_settings
from src.shared.logger import setup_logging
from src.state.controller import AppController
from src.state.storage import JsonStateStorage, NullStorage

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="solarwatch",
        description="SolarWatch — panel telemetry → classified states and alerts",
    )
    p.add_argument(
        "--config-dir",
        default="config",
        help="Directory with settings.yaml. Default: config/",
    )
    p.add_argument(
        "--state",
        default=None,
        help="State file (readings, alerts, rules). Default: state.path from settings.yaml",
    )
    p.add_argument(
        "--no-state",
        action="store_true",
        default=False,
        help="Do not load or save the state file.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )
    sub = p.add_subparsers(dest="command", required=True)

    # -- analyze --
    a = sub.add_parser("analyze", help="Analyse a batch file and regenerate alerts")
    a.add_argument("--input", required=True, help="Delimited text file with a header row")
    a.add_argument("--power-threshold", type=float, default=None, help="Low-power threshold, W")
    a.add_argument("--voltage-threshold", type=float, default=None, help="Low-voltage threshold, V")
    a.add_argument("--out", default="out/alerts.csv", help="Alerts CSV. Default: out/alerts.csv")
    a.add_argument("--report", default="out/report.txt", help="Summary TXT. Default: out/report.txt")
    a.add_argument(
        "--summary", default="out/summary.csv", help="Summary CSV. Default: out/summary.csv"
    )

    # -- rules --
    r = sub.add_parser("rules", help="Manage user-defined rules")
    rsub = r.add_subparsers(dest="rules_command", required=True)
    rsub.add_parser("list", help="List rules in evaluation order")

    for name, help_text in (("add", "Create a rule"), ("edit", "Update a rule in place")):
        rp = rsub.add_parser(name, help=help_text)
        if name == "edit":
            rp.add_argument("rule_id")
        rp.add_argument("--metric", choices=["power", "voltage"], default=None)
        rp.add_argument("--condition", choices=["lt", "gt", "eq", "<", ">", "="], default=None)
        rp.add_argument("--threshold", default=None)
        rp.add_argument("--severity", choices=["warning", "critical"], default=None)
        rp.add_argument("--message", default=None)

    rd = rsub.add_parser("delete", help="Delete a rule (no-op if absent)")
    rd.add_argument("rule_id")
    ri = rsub.add_parser("import", help="Append rules from a YAML preset file")
    ri.add_argument("path")

    # -- export / clear --
    e = sub.add_parser("export", help="Export the current alert list as CSV")
    e.add_argument("--out", default="out/alerts_export.csv")
    sub.add_parser("clear", help="Clear readings, alerts, rules and audio references")
    return p


def _load_settings(args: argparse.Namespace) -> Settings:
    path = Path(args.config_dir) / "settings.yaml"
    if not path.exists():
        log.warning("Settings not found at %s, using defaults", path)
        settings = Settings()
    else:
        settings = load_settings(path)
    return settings.with_overrides(
        power_threshold=getattr(args, "power_threshold", None),
        voltage_threshold=getattr(args, "voltage_threshold", None),
        state_path=args.state,
    )


def _log_notifier() -> AlertNotifier:
    notifier = AlertNotifier()

    def _critical(alert: Alert) -> None:
        log.warning("CRITICAL %s @ %s: %s", alert.panel_id, alert.occurred_at, alert.message)

    def _warning(alert: Alert) -> None:
        log.info("warning %s @ %s: %s", alert.panel_id, alert.occurred_at, alert.message)

    notifier.on_critical(_critical)
    notifier.on_warning(_warning)
    return notifier


def _draft_from_args(args: argparse.Namespace, base: RuleDraft) -> RuleDraft:
    fields = {
        "metric": args.metric or base.metric.value,
        "condition": args.condition or base.condition.value,
        "threshold": args.threshold if args.threshold is not None else base.threshold,
        "severity": args.severity or base.severity.value,
        "message": args.message if args.message is not None else base.message,
    }
    return RuleDraft.from_form(fields)


def _run_rules(ctl: AppController, args: argparse.Namespace) -> int:
    cmd = args.rules_command
    if cmd == "list":
        if not ctl.rules:
            print("No rules defined.")
        for rule in ctl.rules:
            print(
                f"{rule.rule_id}  {rule.metric.value} {rule.condition.symbol} "
                f"{format_threshold(rule.threshold)}"
                f"  [{rule.severity.value}]  {rule.message or rule.describe()}"
            )
        return 0

    if cmd == "delete":
        if not ctl.delete_rule(args.rule_id):
            print(f"Rule {args.rule_id} not found (nothing deleted).")
        return 0

    if cmd == "import":
        added = ctl.import_rules(load_rules_yaml(args.path))
        print(f"Imported {len(added)} rules.")
        return 0

    if cmd == "add":
        base = ctl.start_create_rule()
    else:
        base = ctl.start_edit_rule(args.rule_id)
        if base is None:
            print(f"Rule {args.rule_id} not found.", file=sys.stderr)
            return 1
    try:
        rule = ctl.save_rule(_draft_from_args(args, base))
    except (RuleValidationError, ValueError) as exc:
        print(f"Invalid rule: {exc}", file=sys.stderr)
        return 2
    print(f"Saved {rule.rule_id}: {rule.describe()}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    settings = _load_settings(args)
    storage = NullStorage() if args.no_state else JsonStateStorage(settings.state_path)
    ctl = AppController(settings=settings, storage=storage, notifier=_log_notifier())

    if args.command == "analyze":
        try:
            result = ctl.submit_file(args.input)
        except EmptyBatchError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        write_alerts_csv(result.alerts, args.out)
        summary = ctl.summary()
        write_summary_txt(summary, result.alerts, args.report)
        write_summary_csv(summary, args.summary)
        print(
            f"{len(result.readings)} readings ({result.rejected} rows rejected), "
            f"{len(result.alerts)} alerts → {args.out}"
        )
        return 0

    if args.command == "rules":
        return _run_rules(ctl, args)

    if args.command == "export":
        atomic_write(args.out, ctl.export_alerts_csv())
        print(f"Exported {len(ctl.alerts)} alerts → {args.out}")
        return 0

    if args.command == "clear":
        ctl.clear()
        print("Data cleared.")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
