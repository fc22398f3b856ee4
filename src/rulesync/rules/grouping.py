"""Turn remote records into the candidate rule groups."""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from rulesync.rules.duration import format_duration
from rulesync.rules.models import Rule, RuleGroup, RuleGroups
from rulesync.rules.validator import Rejection, ValidationReport, validate_records
from rulesync.source.base import RawRecord


def group_name_for(rule: Rule, base_name: str, *, group_by_interval: bool = True) -> str:
    """Records with a step get their own ``<base>_<step>`` group."""
    if group_by_interval and rule.interval is not None:
        return f"{base_name}_{format_duration(rule.interval)}"
    return base_name


def group_rules(
    rules: Iterable[Rule],
    base_name: str,
    *,
    group_by_interval: bool = True,
) -> Tuple[RuleGroups, List[Rejection]]:
    """Place *rules* into groups.

    The base group comes first, then interval groups by ascending interval.
    Rules inside a group are sorted by name. When two rules land in the same
    group under the same name, the first one wins.
    """
    buckets: Dict[str, Dict[str, Rule]] = {}
    intervals: Dict[str, Optional[int]] = {}
    rejected: List[Rejection] = []

    for rule in rules:
        name = group_name_for(rule, base_name, group_by_interval=group_by_interval)
        bucket = buckets.setdefault(name, {})
        intervals[name] = rule.interval if name != base_name else None
        # a rule carries its group's interval, as it will after a round trip
        rule = dataclasses.replace(rule, interval=intervals[name])
        if rule.name in bucket:
            rejected.append(Rejection(rule.name, f"duplicate rule in group {name!r}"))
            continue
        bucket[rule.name] = rule

    def _order(name: str) -> Tuple[int, int, str]:
        interval = intervals[name]
        return (0 if name == base_name else 1, interval or 0, name)

    groups = tuple(
        RuleGroup(
            name=name,
            rules=tuple(buckets[name][r] for r in sorted(buckets[name])),
            interval=intervals[name],
        )
        for name in sorted(buckets, key=_order)
    )
    return RuleGroups(groups), rejected


def build_remote_groups(
    records: Iterable[RawRecord],
    base_name: str,
    *,
    default_labels: Mapping[str, str] | None = None,
    group_by_interval: bool = True,
) -> Tuple[RuleGroups, ValidationReport]:
    """Validate *records* and group the survivors.

    The returned report lists every rejected record, including duplicates.
    """
    report = validate_records(records, default_labels)
    groups, duplicates = group_rules(
        report.rules, base_name, group_by_interval=group_by_interval
    )
    report.rejected.extend(duplicates)
    return groups, report
