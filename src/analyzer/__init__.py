"""SolarWatch Analyzer — batch telemetry → panel states → alerts.

Modules
───────
  classifier   — power → normal / low / offline
  statistics   — batch power baseline, two-sigma anomaly check
  rule_engine  — user rules: Reading → matching Rules
  aggregator   — built-in heuristics + rule matches → ordered Alerts
  pipeline     — one synchronous pass over a batch
  notifier     — criticalAlertRaised / warningAlertRaised events
  metrics      — batch summary for the dashboard
  reporter     — CSV / TXT export
  cli          — argparse entry-point
"""
