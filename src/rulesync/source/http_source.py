"""HTTP source — GET an endpoint returning a JSON array of records."""

from __future__ import annotations

from typing import List

import httpx

from rulesync.config.schema import SourceConfig
from rulesync.errors import FetchError
from rulesync.source.base import RawRecord, decode_records


class HttpSource:
    def __init__(self, cfg: SourceConfig) -> None:
        if not cfg.url:
            raise ValueError("http source needs a url")
        self._cfg = cfg
        self._url = cfg.url

    def fetch(self) -> List[RawRecord]:
        try:
            with httpx.Client(timeout=self._cfg.timeout) as client:
                response = client.get(self._url, headers={"Accept": "application/json"})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {self._url}: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"GET {self._url}: invalid JSON: {exc}") from exc
        return decode_records(data, self._cfg, self._url)
