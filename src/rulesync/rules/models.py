"""Rule data model — rules, groups, and the group collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Literal, NamedTuple, Optional, Tuple

RuleKind = Literal["record", "alert"]


class RuleKey(NamedTuple):
    """Diff key: a rule is identified by its group and its name."""

    group: str
    rule: str

    def __str__(self) -> str:
        return f"{self.group}/{self.rule}"


@dataclass(frozen=True)
class Rule:
    """A single recording or alerting rule.

    ``interval`` is the evaluation step the remote record declared, in
    seconds. It is not written per rule; the grouping policy turns it into the
    owning group's interval, and parsing gives each rule its group's interval.

    Rules compare by value but are not hashable, since labels and annotations
    are plain dicts. Index them by :class:`RuleKey` instead.
    """

    __hash__ = None  # type: ignore[assignment]

    name: str
    expr: str
    labels: Dict[str, str] = field(default_factory=dict)
    interval: Optional[int] = None
    kind: RuleKind = "record"
    for_: Optional[int] = None  # alerting rules only
    annotations: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("rule name must not be empty")


@dataclass(frozen=True)
class RuleGroup:
    """A named set of rules evaluated at a shared interval."""

    name: str
    rules: Tuple[Rule, ...] = ()
    interval: Optional[int] = None  # None inherits the global interval

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("group name must not be empty")
        seen: set[str] = set()
        for rule in self.rules:
            if rule.name in seen:
                raise ValueError(f"duplicate rule {rule.name!r} in group {self.name!r}")
            seen.add(rule.name)

    def get(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None


@dataclass(frozen=True)
class RuleGroups:
    """Ordered collection of rule groups, keyed by group name."""

    groups: Tuple[RuleGroup, ...] = ()

    def __post_init__(self) -> None:
        names = [g.name for g in self.groups]
        if len(names) != len(set(names)):
            raise ValueError("duplicate group names")

    def __iter__(self) -> Iterator[RuleGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def get(self, name: str) -> Optional[RuleGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    @property
    def rule_count(self) -> int:
        return sum(len(g.rules) for g in self.groups)

    def rules_by_key(self) -> Dict[RuleKey, Rule]:
        """Flatten every group into a ``RuleKey -> Rule`` mapping."""
        return {
            RuleKey(group.name, rule.name): rule
            for group in self.groups
            for rule in group.rules
        }

    def all_rules(self) -> List[Rule]:
        return [rule for group in self.groups for rule in group.rules]
