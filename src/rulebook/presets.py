"""Rule presets — seed rules from a version-controlled YAML file.

Format::

    rules:
      - metric: power          # power | voltage
        condition: lt          # lt | gt | eq  (or <, >, =)
        threshold: 100
        severity: critical     # warning | critical
        message: "Output collapsed"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from src.contracts.enums import Condition, Metric, Severity
from src.contracts.rule import Rule
from src.shared.config_loader import load_yaml

log = logging.getLogger(__name__)


def rules_from_config(cfg: dict[str, Any]) -> list[Rule]:
    """Build rules from the parsed YAML dict. Invalid entries are skipped."""
    rules: list[Rule] = []
    for i, entry in enumerate(cfg.get("rules") or [], 1):
        if not entry.get("enabled", True):
            continue
        try:
            rule = Rule(
                rule_id=f"RULE-{i:03d}",
                metric=Metric(str(entry["metric"]).lower()),
                condition=Condition.parse(entry["condition"]),
                threshold=float(entry["threshold"]),
                severity=Severity(str(entry.get("severity", "warning")).lower()),
                message=str(entry.get("message") or ""),
            )
        except (KeyError, ValueError, TypeError) as exc:
            log.warning("Skipping rule preset #%d: %s", i, exc)
            continue
        rules.append(rule)
    return rules


def load_rules_yaml(path: str | Path) -> list[Rule]:
    """Load rule presets from *path*."""
    rules = rules_from_config(load_yaml(path))
    log.info("Loaded %d rule presets from %s", len(rules), Path(path).name)
    return rules
