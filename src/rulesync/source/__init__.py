"""Rule source adapters."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rulesync.config.schema import SourceConfig
from rulesync.source.base import RawRecord, RuleSource
from rulesync.source.file_source import FileSource
from rulesync.source.http_source import HttpSource
from rulesync.source.redis_source import RedisListSource


def build_source(cfg: SourceConfig, base_dir: Optional[Path] = None) -> RuleSource:
    """Create the source named by ``cfg.kind``.

    A relative file-source path is resolved against *base_dir*.
    """
    if cfg.kind == "redis":
        return RedisListSource(cfg)
    if cfg.kind == "file":
        if not cfg.path:
            raise ValueError("file source needs a path")
        path = Path(cfg.path)
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return FileSource(cfg, path)
    if cfg.kind == "http":
        return HttpSource(cfg)
    raise ValueError(f"unknown source kind: {cfg.kind!r}")


__all__ = [
    "FileSource",
    "HttpSource",
    "RawRecord",
    "RedisListSource",
    "RuleSource",
    "build_source",
]
