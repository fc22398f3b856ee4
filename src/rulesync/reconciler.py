"""Reconciler — one fetch → validate → parse → diff → persist → reload pass.

Failure policy:

- fetch or parse failures end the pass before anything is written;
- a failed write ends the pass without a reload;
- a failed reload is reported but the written file stands.

The whole rule file is rewritten whenever anything changed. Content in that
file that did not come from the source (hand-added groups, comments) is lost
on the next write.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rulesync.config.schema import RulesyncConfig
from rulesync.diff.engine import compare
from rulesync.diff.models import DiffResult
from rulesync.errors import FetchError, ParseError, PersistError, ReloadError
from rulesync.log import get_logger
from rulesync.reload.notifier import ReloadNotifier, build_notifier
from rulesync.rules.grouping import build_remote_groups
from rulesync.rules.rulefile import load_rule_file, write_rule_file
from rulesync.rules.validator import Rejection
from rulesync.source.base import RuleSource

logger = get_logger(__name__)


class OutcomeKind(str, Enum):
    NO_CHANGE = "no_change"
    APPLIED = "applied"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    PERSIST_FAILED = "persist_failed"


@dataclass
class Outcome:
    """Result of one reconciliation pass."""

    kind: OutcomeKind
    reason: Optional[str] = None  # set on the *_FAILED kinds
    diff: Optional[DiffResult] = None
    rejected: List[Rejection] = field(default_factory=list)
    reload_error: Optional[str] = None
    dry_run: bool = False
    duration_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.kind not in (OutcomeKind.NO_CHANGE, OutcomeKind.APPLIED)


class Reconciler:
    """Keep one rule file in line with a rule source.

    Parameters:
        config: Full configuration; the ``rules`` section drives grouping.
        notifier: Reload trigger. Built from ``config.reload`` when omitted.
    """

    def __init__(
        self,
        config: RulesyncConfig,
        notifier: Optional[ReloadNotifier] = None,
    ) -> None:
        self.config = config
        self.notifier = notifier if notifier is not None else build_notifier(config.reload)
        # held from parse to write so concurrent callers never race on the file
        self._lock = threading.Lock()

    # ---- public API ----

    def reconcile(self, source: RuleSource, local_path: Path) -> Outcome:
        """Run one full pass and return its Outcome."""
        return self._run(source, local_path, dry_run=False)

    def plan(self, source: RuleSource, local_path: Path) -> Outcome:
        """Compute what :meth:`reconcile` would do, without writing or reloading."""
        return self._run(source, local_path, dry_run=True)

    # ---- pass ----

    def _run(self, source: RuleSource, local_path: Path, *, dry_run: bool) -> Outcome:
        start = time.perf_counter()
        log = logger.bind(path=str(local_path), dry_run=dry_run)
        outcome = self._pass(source, local_path, dry_run, log)
        outcome.dry_run = dry_run
        outcome.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return outcome

    def _pass(self, source: RuleSource, local_path: Path, dry_run: bool, log) -> Outcome:
        # --- Fetch ---
        try:
            records = source.fetch()
        except FetchError as exc:
            log.error("fetch_failed", error=str(exc))
            return Outcome(OutcomeKind.FETCH_FAILED, reason=str(exc))
        except Exception as exc:
            log.exception("fetch_failed", error=str(exc))
            return Outcome(OutcomeKind.FETCH_FAILED, reason=f"{type(exc).__name__}: {exc}")

        # --- Validate + group ---
        rules_cfg = self.config.rules
        remote, report = build_remote_groups(
            records,
            rules_cfg.group_name,
            default_labels=rules_cfg.default_labels,
            group_by_interval=rules_cfg.group_by_interval,
        )
        for rejection in report.rejected:
            log.warning("record_rejected", rule=rejection.name, reason=rejection.reason)

        with self._lock:
            # --- Parse local ---
            try:
                local = load_rule_file(local_path)
            except ParseError as exc:
                log.error("parse_failed", error=str(exc))
                return Outcome(
                    OutcomeKind.PARSE_FAILED, reason=str(exc), rejected=report.rejected
                )

            # --- Diff ---
            diff = compare(local, remote)
            if not diff.changed:
                log.info("rules_unchanged", rules=remote.rule_count)
                return Outcome(OutcomeKind.NO_CHANGE, diff=diff, rejected=report.rejected)

            log.info(
                "rules_changed",
                added=diff.added_names,
                updated=diff.updated_names,
                deleted=diff.deleted_names,
            )
            if dry_run:
                return Outcome(OutcomeKind.APPLIED, diff=diff, rejected=report.rejected)

            # --- Persist ---
            try:
                write_rule_file(local_path, remote)
            except PersistError as exc:
                log.error("persist_failed", error=str(exc))
                return Outcome(
                    OutcomeKind.PERSIST_FAILED,
                    reason=str(exc),
                    diff=diff,
                    rejected=report.rejected,
                )

        log.info(
            "rules_applied",
            added=len(diff.added),
            updated=len(diff.updated),
            deleted=len(diff.deleted),
        )

        # --- Reload ---
        outcome = Outcome(OutcomeKind.APPLIED, diff=diff, rejected=report.rejected)
        try:
            self.notifier.notify()
        except ReloadError as exc:
            log.warning("reload_failed", error=str(exc))
            outcome.reload_error = str(exc)
        else:
            log.info("reload_sent")
        return outcome
