"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional

SourceKind = Literal["redis", "file", "http"]
ReloadKind = Literal["http", "signal", "none"]

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class SourceConfig:
    kind: SourceKind = "redis"
    redis_url: str = "redis://localhost:6379/0"
    key: str = "CUSTOM_EXPRESS_STRATEGY"  # redis list holding JSON records
    name_field: str = "alarm_name"
    expr_field: str = "expre"
    interval_field: str = "step"
    labels_field: str = "labels"
    path: Optional[str] = None  # file source
    url: Optional[str] = None  # http source
    timeout: float = 5.0


@dataclass
class RulesConfig:
    file_name: str = "rules.yml"
    group_name: str = "rulesync"
    default_labels: Dict[str, str] = field(default_factory=dict)
    group_by_interval: bool = True


@dataclass
class ReloadConfig:
    kind: ReloadKind = "http"
    url: str = "http://127.0.0.1:9090/-/reload"
    method: str = "POST"
    timeout: float = 3.0
    pid: Optional[int] = None
    pid_file: Optional[str] = None


@dataclass
class ScheduleConfig:
    interval: float = 60.0  # seconds between passes


@dataclass
class LoggingConfig:
    level: str = "info"
    json: bool = False


@dataclass
class RulesyncConfig:
    version: str = "1.0"
    source: SourceConfig = field(default_factory=SourceConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    reload: ReloadConfig = field(default_factory=ReloadConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
