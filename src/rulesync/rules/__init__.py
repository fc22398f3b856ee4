"""Rule model, validation, grouping, and the rule file codec."""

from rulesync.rules.models import Rule, RuleGroup, RuleGroups, RuleKey
from rulesync.rules.rulefile import (
    dump_rule_groups,
    load_rule_file,
    parse_rule_groups,
    write_rule_file,
)
from rulesync.rules.validator import Rejection, validate_records

__all__ = [
    "Rejection",
    "Rule",
    "RuleGroup",
    "RuleGroups",
    "RuleKey",
    "dump_rule_groups",
    "load_rule_file",
    "parse_rule_groups",
    "validate_records",
    "write_rule_file",
]
