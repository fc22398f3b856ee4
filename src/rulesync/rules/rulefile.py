"""Prometheus rule file codec — strict parsing, canonical YAML output.

The on-disk document is::

    groups:
      - name: <string>
        interval: <duration>      # optional
        rules:
          - record: <string>      # or alert: <string>
            expr: <string>
            for: <duration>       # alerts only
            labels: {<string>: <string>}
            annotations: {<string>: <string>}  # alerts only

Anything else is a ParseError. ``parse_rule_groups(dump_rule_groups(x)) == x``
holds for every valid RuleGroups ``x`` whose rules carry their group's
interval.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rulesync.errors import ParseError, PersistError
from rulesync.rules.duration import format_duration, parse_duration
from rulesync.rules.models import Rule, RuleGroup, RuleGroups

_GROUP_KEYS = {"name", "interval", "rules"}
_RULE_KEYS = {"record", "alert", "expr", "for", "labels", "annotations"}


# ---- parsing ----


def _scalar_str(value: Any, where: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ParseError(f"{where}: expected a string, got {type(value).__name__}")


def _parse_mapping(value: Any, where: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected a mapping")
    return {
        _scalar_str(k, where): _scalar_str(v, f"{where}.{k}")
        for k, v in value.items()
    }


def _parse_duration_field(value: Any, where: str) -> int:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise ParseError(f"{where}: {exc}") from exc


def _parse_rule(data: Any, where: str, group_interval: Optional[int]) -> Rule:
    if not isinstance(data, dict):
        raise ParseError(f"{where}: expected a mapping")
    unknown = set(data) - _RULE_KEYS
    if unknown:
        raise ParseError(f"{where}: unknown field(s) {', '.join(sorted(map(str, unknown)))}")

    has_record = data.get("record") not in (None, "")
    has_alert = data.get("alert") not in (None, "")
    if has_record == has_alert:
        raise ParseError(f"{where}: exactly one of 'record' or 'alert' is required")
    kind = "record" if has_record else "alert"
    name = _scalar_str(data[kind], f"{where}.{kind}")

    if data.get("expr") in (None, ""):
        raise ParseError(f"{where}: 'expr' is required")
    expr = _scalar_str(data["expr"], f"{where}.expr")

    for_ = None
    if data.get("for") is not None:
        if kind != "alert":
            raise ParseError(f"{where}: 'for' is only valid on alerting rules")
        for_ = _parse_duration_field(data["for"], f"{where}.for")

    annotations = _parse_mapping(data.get("annotations"), f"{where}.annotations")
    if annotations and kind != "alert":
        raise ParseError(f"{where}: 'annotations' are only valid on alerting rules")

    return Rule(
        name=name,
        expr=expr,
        labels=_parse_mapping(data.get("labels"), f"{where}.labels"),
        interval=group_interval,
        kind=kind,
        for_=for_,
        annotations=annotations,
    )


def _parse_group(data: Any, where: str) -> RuleGroup:
    if not isinstance(data, dict):
        raise ParseError(f"{where}: expected a mapping")
    unknown = set(data) - _GROUP_KEYS
    if unknown:
        raise ParseError(f"{where}: unknown field(s) {', '.join(sorted(map(str, unknown)))}")
    if data.get("name") in (None, ""):
        raise ParseError(f"{where}: group name is required")
    name = _scalar_str(data["name"], f"{where}.name")

    interval = None
    if data.get("interval") is not None:
        interval = _parse_duration_field(data["interval"], f"{where}.interval")

    raw_rules = data.get("rules")
    if raw_rules is None:
        raw_rules = []
    if not isinstance(raw_rules, list):
        raise ParseError(f"{where}.rules: expected a list")
    rules = tuple(
        _parse_rule(r, f"{where}.rules[{i}]", interval) for i, r in enumerate(raw_rules)
    )
    try:
        return RuleGroup(name=name, rules=rules, interval=interval)
    except ValueError as exc:
        raise ParseError(f"{where}: {exc}") from exc


def parse_rule_groups(text: str, source: str = "<string>") -> RuleGroups:
    """Parse a rule file document. Raises ParseError."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(f"{source}: invalid YAML: {exc}") from exc

    if data is None:
        return RuleGroups()
    if not isinstance(data, dict):
        raise ParseError(f"{source}: expected a mapping with a 'groups' key")
    unknown = set(data) - {"groups"}
    if unknown:
        raise ParseError(f"{source}: unknown field(s) {', '.join(sorted(map(str, unknown)))}")

    raw_groups = data.get("groups")
    if raw_groups is None:
        raw_groups = []
    if not isinstance(raw_groups, list):
        raise ParseError(f"{source}: 'groups' must be a list")
    groups = tuple(
        _parse_group(g, f"{source}: groups[{i}]") for i, g in enumerate(raw_groups)
    )
    try:
        return RuleGroups(groups)
    except ValueError as exc:
        raise ParseError(f"{source}: {exc}") from exc


def load_rule_file(path: Path) -> RuleGroups:
    """Read and parse *path*. A missing file is an empty RuleGroups."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return RuleGroups()
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"{path}: cannot read: {exc}") from exc
    return parse_rule_groups(text, str(path))


# ---- serialisation ----


def _rule_to_dict(rule: Rule) -> Dict[str, Any]:
    out: Dict[str, Any] = {rule.kind: rule.name, "expr": rule.expr}
    if rule.for_ is not None:
        out["for"] = format_duration(rule.for_)
    if rule.labels:
        out["labels"] = dict(sorted(rule.labels.items()))
    if rule.annotations:
        out["annotations"] = dict(sorted(rule.annotations.items()))
    return out


def to_dict(groups: RuleGroups) -> Dict[str, Any]:
    """Convert RuleGroups to a YAML-serialisable dict."""
    out: List[Dict[str, Any]] = []
    for group in groups:
        entry: Dict[str, Any] = {"name": group.name}
        if group.interval is not None:
            entry["interval"] = format_duration(group.interval)
        entry["rules"] = [_rule_to_dict(r) for r in group.rules]
        out.append(entry)
    return {"groups": out}


def dump_rule_groups(groups: RuleGroups) -> str:
    """Return the canonical YAML document for *groups*."""
    return yaml.safe_dump(
        to_dict(groups),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def write_rule_file(path: Path, groups: RuleGroups) -> None:
    """Replace *path* with the serialised *groups*. Raises PersistError.

    The document goes to a temporary file in the same directory first and is
    then renamed over *path*, so readers never see a half-written file.
    """
    text = dump_rule_groups(groups)
    try:
        mode = path.stat().st_mode & 0o777
    except FileNotFoundError:
        mode = 0o644
    except OSError as exc:
        raise PersistError(f"{path}: {exc}") from exc

    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistError(f"{path}: {exc}") from exc
