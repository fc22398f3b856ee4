"""Tests for the outcome reporters."""

import json

from rich.console import Console

from rulesync.diff.models import DiffResult
from rulesync.output import json_report, terminal
from rulesync.reconciler import Outcome, OutcomeKind
from rulesync.rules.models import RuleKey
from rulesync.rules.validator import Rejection


def _make_outcome(**kwargs) -> Outcome:
    """Build an APPLIED outcome with sample data."""
    defaults = dict(
        kind=OutcomeKind.APPLIED,
        diff=DiffResult(
            added=frozenset({RuleKey("groupA", "y")}),
            updated=frozenset({RuleKey("groupA", "x")}),
            deleted=frozenset(),
        ),
        rejected=[Rejection("bad", "empty expression")],
        duration_ms=12.5,
    )
    defaults.update(kwargs)
    return Outcome(**defaults)


def _capture(outcome: Outcome) -> str:
    console = Console(record=True, width=120)
    terminal.render(outcome, console=console)
    return console.export_text()


class TestJsonReport:
    def test_structure(self):
        data = json.loads(json_report.render(_make_outcome()))
        assert data["outcome"] == "applied"
        assert data["total_changes"] == 2
        assert data["changes"]["added"] == [{"group": "groupA", "rule": "y"}]
        assert data["changes"]["updated"] == [{"group": "groupA", "rule": "x"}]
        assert data["changes"]["deleted"] == []
        assert data["rejected"] == [{"rule": "bad", "reason": "empty expression"}]
        assert "reason" not in data
        assert "reload_error" not in data

    def test_failure(self):
        data = json_report.to_dict(
            Outcome(OutcomeKind.FETCH_FAILED, reason="connection refused")
        )
        assert data["outcome"] == "fetch_failed"
        assert data["reason"] == "connection refused"
        assert data["total_changes"] == 0

    def test_reload_error_included(self):
        data = json_report.to_dict(_make_outcome(reload_error="HTTP 500"))
        assert data["reload_error"] == "HTTP 500"


class TestTerminal:
    def test_changes_table(self):
        text = _capture(_make_outcome())
        assert "Rule Changes" in text
        assert "ADDED" in text
        assert "UPDATED" in text
        assert "bad" in text
        assert "Rule file written" in text

    def test_up_to_date(self):
        text = _capture(Outcome(OutcomeKind.NO_CHANGE, diff=DiffResult()))
        assert "up to date" in text

    def test_dry_run(self):
        text = _capture(_make_outcome(dry_run=True))
        assert "Pending Rule Changes" in text
        assert "nothing was written" in text

    def test_failure(self):
        text = _capture(Outcome(OutcomeKind.PARSE_FAILED, reason="rules.yml: invalid YAML"))
        assert "PARSE FAILED" in text
        assert "invalid YAML" in text

    def test_reload_warning(self):
        text = _capture(_make_outcome(reload_error="HTTP 500"))
        assert "Reload failed" in text
