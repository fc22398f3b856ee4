"""Redis list source — every list entry is one JSON-encoded record."""

from __future__ import annotations

import json
from typing import List, Optional

import redis

from rulesync.config.schema import SourceConfig
from rulesync.errors import FetchError
from rulesync.log import get_logger
from rulesync.source.base import RawRecord, decode_record

logger = get_logger(__name__)


class RedisListSource:
    """Read rule records with ``LRANGE <key> 0 -1``.

    Parameters:
        cfg: Source settings (URL, list key, record field names).
        client: Optional pre-built client. When omitted a client is created
            for each fetch and closed afterwards.
    """

    def __init__(self, cfg: SourceConfig, client: Optional[redis.Redis] = None) -> None:
        self._cfg = cfg
        self._client = client

    def _connect(self) -> redis.Redis:
        return redis.Redis.from_url(
            self._cfg.redis_url,
            socket_timeout=self._cfg.timeout,
            socket_connect_timeout=self._cfg.timeout,
            decode_responses=True,
        )

    def fetch(self) -> List[RawRecord]:
        client = self._client or self._connect()
        try:
            entries = client.lrange(self._cfg.key, 0, -1)
        except redis.RedisError as exc:
            raise FetchError(f"redis {self._cfg.key}: {exc}") from exc
        finally:
            if self._client is None:
                client.close()

        logger.debug("redis_fetched", key=self._cfg.key, entries=len(entries))
        records: List[RawRecord] = []
        for i, entry in enumerate(entries):
            where = f"redis {self._cfg.key}[{i}]"
            if isinstance(entry, bytes):
                entry = entry.decode("utf-8", errors="replace")
            try:
                data = json.loads(entry)
            except json.JSONDecodeError as exc:
                raise FetchError(f"{where}: invalid JSON: {exc}") from exc
            records.append(decode_record(data, self._cfg, where))
        return records
