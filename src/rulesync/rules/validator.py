"""Syntactic rule validation.

Checks only what can be verified without a query engine: names, label names,
bracket and quote balance in the expression, and interval format.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping

from rulesync.errors import RecordValidationError
from rulesync.rules.duration import parse_duration
from rulesync.rules.models import Rule
from rulesync.source.base import RawRecord

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_QUOTES = {'"', "'", "`"}


@dataclass(frozen=True)
class Rejection:
    """A record the validator refused, and why."""

    name: str
    reason: str


@dataclass
class ValidationReport:
    rules: List[Rule] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)


def expression_problem(expr: str) -> str | None:
    """Return a description of the first syntax problem in *expr*, or None."""
    stack: List[str] = []
    quote: str | None = None
    escaped = False
    for ch in expr:
        if quote is not None:
            if escaped:
                escaped = False
            elif ch == "\\" and quote != "`":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack.pop() != ch:
                return f"unexpected {ch!r}"
    if quote is not None:
        return f"unterminated {quote} string"
    if stack:
        return f"missing {stack[-1]!r}"
    return None


def label_problems(labels: Mapping, what: str = "label") -> List[str]:
    problems: List[str] = []
    for key, value in labels.items():
        if not isinstance(key, str) or not _LABEL_NAME_RE.match(key):
            problems.append(f"invalid {what} name {key!r}")
        elif key.startswith("__"):
            problems.append(f"{what} name {key!r} is reserved")
        if not isinstance(value, str):
            problems.append(f"{what} {key!r} value must be a string")
    return problems


def rule_problems(rule: Rule) -> List[str]:
    """Return every syntactic problem with an already-built rule."""
    problems: List[str] = []
    if rule.kind == "record" and not _METRIC_NAME_RE.match(rule.name):
        problems.append(f"invalid recording rule name {rule.name!r}")
    if not rule.expr.strip():
        problems.append("empty expression")
    elif (problem := expression_problem(rule.expr)) is not None:
        problems.append(f"expression: {problem}")
    problems.extend(label_problems(rule.labels))
    if rule.kind == "alert":
        problems.extend(label_problems(rule.annotations, "annotation"))
    elif rule.annotations or rule.for_ is not None:
        problems.append("recording rules cannot have 'for' or 'annotations'")
    return problems


def validate_record(
    record: RawRecord,
    default_labels: Mapping[str, str] | None = None,
) -> Rule:
    """Turn *record* into a Rule. Raises RecordValidationError."""
    name = record.name.strip() if isinstance(record.name, str) else ""
    if not name:
        raise RecordValidationError(name, "empty name")
    if not isinstance(record.expr, str) or not record.expr.strip():
        raise RecordValidationError(name, "empty expression")

    interval = None
    if record.interval is not None:
        try:
            interval = parse_duration(record.interval)
        except ValueError as exc:
            raise RecordValidationError(name, str(exc)) from exc

    labels = dict(default_labels or {})
    if record.labels is not None:
        if not isinstance(record.labels, Mapping):
            raise RecordValidationError(name, "labels must be a mapping")
        labels.update(record.labels)

    rule = Rule(name=name, expr=record.expr.strip(), labels=labels, interval=interval)
    problems = rule_problems(rule)
    if problems:
        raise RecordValidationError(name, "; ".join(problems))
    return rule


def validate_records(
    records: Iterable[RawRecord],
    default_labels: Mapping[str, str] | None = None,
) -> ValidationReport:
    """Validate every record; invalid ones are collected, never raised."""
    report = ValidationReport()
    for record in records:
        try:
            report.rules.append(validate_record(record, default_labels))
        except RecordValidationError as exc:
            report.rejected.append(Rejection(name=exc.name, reason=exc.reason))
    return report
