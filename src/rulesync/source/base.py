"""Source adapter interface and the raw record it yields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Union

from rulesync.config.schema import SourceConfig
from rulesync.errors import FetchError


@dataclass(frozen=True)
class RawRecord:
    """One remote rule definition, exactly as the source delivered it."""

    name: str
    expr: str
    interval: Optional[Union[int, float, str]] = None
    labels: Optional[Any] = None


class RuleSource(Protocol):
    """Anything that can produce raw rule records."""

    def fetch(self) -> List[RawRecord]:
        """Return every remote record. Raises FetchError on failure."""
        ...


def decode_record(data: Any, cfg: SourceConfig, where: str) -> RawRecord:
    """Build a RawRecord from one decoded JSON object.

    A missing name or expression yields an empty string so the validator can
    reject the record by name; a value that is not an object at all means the
    source itself is broken.
    """
    if not isinstance(data, dict):
        raise FetchError(f"{where}: expected a JSON object, got {type(data).__name__}")
    name = data.get(cfg.name_field)
    expr = data.get(cfg.expr_field)
    return RawRecord(
        name=name if isinstance(name, str) else "",
        expr=expr.strip() if isinstance(expr, str) else "",
        interval=data.get(cfg.interval_field),
        labels=data.get(cfg.labels_field),
    )


def decode_records(items: Any, cfg: SourceConfig, where: str) -> List[RawRecord]:
    """Decode a JSON array of record objects."""
    if not isinstance(items, list):
        raise FetchError(f"{where}: expected a JSON array, got {type(items).__name__}")
    return [decode_record(item, cfg, f"{where}[{i}]") for i, item in enumerate(items)]
