"""Diff engine — classify rules as added, updated, or deleted.

Rules are matched across the two sets by ``(group, name)``; content is then
compared field by field. A rule whose name is reused in two groups is two
distinct rules, and a rule that moves between groups is a deletion plus an
addition.
"""

from __future__ import annotations

from typing import Dict, Optional

from rulesync.diff.models import DiffResult
from rulesync.rules.models import Rule, RuleGroups, RuleKey


def _flatten(groups: Optional[RuleGroups]) -> Dict[RuleKey, Rule]:
    """Map every rule in *groups* to its key. Anything unusable is empty."""
    if not isinstance(groups, RuleGroups):
        return {}
    return groups.rules_by_key()


def compare(local: Optional[RuleGroups], remote: Optional[RuleGroups]) -> DiffResult:
    """Return what must change to turn *local* into *remote*.

    Pure: neither input is modified and nothing is read or written.
    """
    local_rules = _flatten(local)
    remote_rules = _flatten(remote)

    added = set()
    updated = set()
    for key, remote_rule in remote_rules.items():
        local_rule = local_rules.get(key)
        if local_rule is None:
            added.add(key)
        elif local_rule != remote_rule:
            updated.add(key)

    deleted = set(local_rules) - set(remote_rules)

    return DiffResult(
        added=frozenset(added),
        updated=frozenset(updated),
        deleted=frozenset(deleted),
    )
