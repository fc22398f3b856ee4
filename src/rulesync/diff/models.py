"""Diff result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List

from rulesync.rules.models import RuleKey


@dataclass(frozen=True)
class DiffResult:
    """Classification of every rule that differs between two rule sets.

    The three sets are pairwise disjoint. A rule present on both sides with
    identical content appears in none of them.
    """

    added: FrozenSet[RuleKey] = field(default_factory=frozenset)
    updated: FrozenSet[RuleKey] = field(default_factory=frozenset)
    deleted: FrozenSet[RuleKey] = field(default_factory=frozenset)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.updated) + len(self.deleted)

    @property
    def changed(self) -> bool:
        return self.total > 0

    @property
    def added_names(self) -> List[str]:
        return sorted({k.rule for k in self.added})

    @property
    def updated_names(self) -> List[str]:
        return sorted({k.rule for k in self.updated})

    @property
    def deleted_names(self) -> List[str]:
        return sorted({k.rule for k in self.deleted})
