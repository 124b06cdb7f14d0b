"""Rule Store — CRUD state machine for user-defined Rules.

States
──────
  idle                 no rule being edited
  editing(new)         blank draft, ``save`` appends a rule
  editing(rule_id)     draft pre-populated from an existing rule,
                       ``save`` replaces it in place (same id, same position)

Only one draft is in flight at a time (single operator). A failed ``save``
raises ``RuleValidationError`` and leaves the store in editing state so the
draft is not lost.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum

from src.contracts.errors import RuleValidationError
from src.contracts.rule import Rule, RuleDraft

log = logging.getLogger(__name__)

_ID_RE = re.compile(r"^RULE-(\d+)$")


class StoreState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


def _parse_threshold(raw: str | float | None) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def validate_draft(draft: RuleDraft) -> float:
    """Check a draft and return its numeric threshold.

    Raises:
        RuleValidationError: If the threshold is not a finite number or the
            message is empty.
    """
    problems: list[str] = []
    threshold = _parse_threshold(draft.threshold)
    if threshold is None:
        problems.append(f"threshold must be a finite number, got {draft.threshold!r}")
    if not draft.message or not draft.message.strip():
        problems.append("message must not be empty")
    if problems:
        raise RuleValidationError(problems)
    return threshold


class RuleStore:
    """Ordered rule collection plus the single edit-in-progress."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: list[Rule] = []
        self._seq = 0
        self._editing = False
        self._edit_id: str | None = None
        self._draft: RuleDraft | None = None
        for rule in rules:
            self._rules.append(rule)
            self._bump_seq(rule.rule_id)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> RuleStore:
        return cls(rules)

    # ── read access ──────────────────────────────────────────────────────

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Snapshot in store order."""
        return tuple(self._rules)

    @property
    def state(self) -> StoreState:
        return StoreState.EDITING if self._editing else StoreState.IDLE

    @property
    def editing_id(self) -> str | None:
        """Id of the rule being edited; None when idle or creating."""
        return self._edit_id

    @property
    def draft(self) -> RuleDraft | None:
        return self._draft

    def get(self, rule_id: str) -> Rule | None:
        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(tuple(self._rules))

    # ── transitions ──────────────────────────────────────────────────────

    def start_create(self) -> RuleDraft:
        self._editing = True
        self._edit_id = None
        self._draft = RuleDraft()
        return self._draft

    def start_edit(self, rule_id: str) -> RuleDraft | None:
        """Begin editing *rule_id*. Unknown ids leave the store untouched."""
        rule = self.get(rule_id)
        if rule is None:
            log.debug("start_edit: rule %s not found, ignored", rule_id)
            return None
        self._editing = True
        self._edit_id = rule_id
        self._draft = RuleDraft.from_rule(rule)
        return self._draft

    def save(self, draft: RuleDraft | None = None) -> Rule:
        """Validate and commit *draft* (defaults to the current draft)."""
        draft = draft if draft is not None else (self._draft or RuleDraft())
        if not self._editing:
            self.start_create()
        self._draft = draft

        threshold = validate_draft(draft)
        message = draft.message.strip()

        idx = self._index_of(self._edit_id) if self._edit_id else None
        if idx is not None:
            rule = replace(
                self._rules[idx],
                metric=draft.metric,
                condition=draft.condition,
                threshold=threshold,
                severity=draft.severity,
                message=message,
            )
            self._rules[idx] = rule
            log.info("Updated rule %s: %s", rule.rule_id, rule.describe())
        else:
            rule = Rule(
                rule_id=self._next_id(),
                metric=draft.metric,
                condition=draft.condition,
                threshold=threshold,
                severity=draft.severity,
                message=message,
            )
            self._rules.append(rule)
            log.info("Created rule %s: %s", rule.rule_id, rule.describe())

        self._reset()
        return rule

    def cancel(self) -> None:
        self._reset()

    def add(self, rule: Rule) -> Rule:
        """Append a fully-formed rule (presets, persisted state); a fresh id is assigned."""
        rule = replace(rule, rule_id=self._next_id())
        self._rules.append(rule)
        return rule

    def delete(self, rule_id: str) -> bool:
        """Remove *rule_id*. Returns False (no-op) when absent."""
        idx = self._index_of(rule_id)
        if idx is None:
            return False
        del self._rules[idx]
        log.info("Deleted rule %s", rule_id)
        return True

    def clear(self) -> None:
        self._rules.clear()
        self._reset()

    # ── internals ────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._editing = False
        self._edit_id = None
        self._draft = None

    def _index_of(self, rule_id: str | None) -> int | None:
        for i, rule in enumerate(self._rules):
            if rule.rule_id == rule_id:
                return i
        return None

    def _bump_seq(self, rule_id: str) -> None:
        m = _ID_RE.match(rule_id)
        if m:
            self._seq = max(self._seq, int(m.group(1)))

    def _next_id(self) -> str:
        self._seq += 1
        return f"RULE-{self._seq:03d}"
