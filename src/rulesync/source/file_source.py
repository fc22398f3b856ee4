"""JSON file source — a JSON array of record objects on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from rulesync.config.schema import SourceConfig
from rulesync.errors import FetchError
from rulesync.source.base import RawRecord, decode_records


class FileSource:
    def __init__(self, cfg: SourceConfig, path: Path) -> None:
        self._cfg = cfg
        self._path = path

    def fetch(self) -> List[RawRecord]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(f"{self._path}: cannot read: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise FetchError(f"{self._path}: invalid JSON: {exc}") from exc
        return decode_records(data, self._cfg, str(self._path))
