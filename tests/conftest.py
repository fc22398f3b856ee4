"""Shared test fixtures — sample rule files, fake sources and notifiers."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List

import pytest
import structlog

from rulesync.config.schema import RulesyncConfig
from rulesync.errors import FetchError, ReloadError
from rulesync.source.base import RawRecord


class StaticSource:
    """Source returning a fixed list of records."""

    def __init__(self, records: List[RawRecord]) -> None:
        self.records = records
        self.calls = 0

    def fetch(self) -> List[RawRecord]:
        self.calls += 1
        return list(self.records)


class FailingSource:
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or FetchError("connection refused")

    def fetch(self) -> List[RawRecord]:
        raise self.exc


class RecordingNotifier:
    """Notifier that counts calls and can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail

    def notify(self) -> None:
        self.calls += 1
        if self.fail:
            raise ReloadError("connection refused")


class FakeRedis:
    """Just enough of redis.Redis for RedisListSource."""

    def __init__(self, lists: dict | None = None, error: Exception | None = None) -> None:
        self.lists = lists or {}
        self.error = error
        self.closed = False

    def lrange(self, key, start, end):
        if self.error is not None:
            raise self.error
        return list(self.lists.get(key, []))

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo any logging configuration a test (or the CLI) installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def config() -> RulesyncConfig:
    """Default config with the base group named groupA."""
    cfg = RulesyncConfig()
    cfg.rules.group_name = "groupA"
    return cfg


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def static_source():
    """Factory for sources that return a fixed list of records."""
    return StaticSource


@pytest.fixture
def failing_source():
    """Factory for sources whose fetch() raises."""
    return FailingSource


@pytest.fixture
def make_notifier():
    """Factory for RecordingNotifier, e.g. ``make_notifier(fail=True)``."""
    return RecordingNotifier


@pytest.fixture
def fake_redis():
    """Factory for the in-memory Redis stand-in."""
    return FakeRedis


@pytest.fixture
def rule_file(tmp_path: Path) -> Path:
    return tmp_path / "rules.yml"


@pytest.fixture
def sample_rules_yaml() -> str:
    """A rule file with one recording group and one alerting group."""
    return textwrap.dedent("""\
        groups:
          - name: groupA
            rules:
              - record: x
                expr: up==1
          - name: alerts
            interval: 30s
            rules:
              - alert: InstanceDown
                expr: up == 0
                for: 5m
                labels:
                  severity: page
                annotations:
                  summary: "{{ $labels.instance }} down"
    """)


@pytest.fixture
def malformed_rules_yaml() -> str:
    return textwrap.dedent("""\
        groups:
          - name: groupA
            rules:
              - record: x
                expr: [unclosed
    """)
