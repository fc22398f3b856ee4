"""Load and merge configuration from .rulesync.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from rulesync.config.schema import (
    LOG_LEVELS,
    LoggingConfig,
    ReloadConfig,
    RulesConfig,
    RulesyncConfig,
    ScheduleConfig,
    SourceConfig,
)
from rulesync.errors import ConfigError

CONFIG_FILE_NAME = ".rulesync.toml"


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: RulesyncConfig) -> None:
    if cfg.source.kind not in ("redis", "file", "http"):
        raise ConfigError(f"Unknown source kind: {cfg.source.kind!r}")
    if cfg.source.kind == "file" and not cfg.source.path:
        raise ConfigError("[source] path is required for the file source")
    if cfg.source.kind == "http" and not cfg.source.url:
        raise ConfigError("[source] url is required for the http source")
    if cfg.reload.kind not in ("http", "signal", "none"):
        raise ConfigError(f"Unknown reload kind: {cfg.reload.kind!r}")
    if cfg.reload.kind == "signal" and cfg.reload.pid is None and not cfg.reload.pid_file:
        raise ConfigError("[reload] pid or pid_file is required for the signal notifier")
    if not cfg.rules.group_name:
        raise ConfigError("[rules] group_name must not be empty")
    if not isinstance(cfg.rules.default_labels, dict) or not all(
        isinstance(v, str) for v in cfg.rules.default_labels.values()
    ):
        raise ConfigError("[rules.default_labels] values must be strings")
    if cfg.schedule.interval <= 0:
        raise ConfigError("[schedule] interval must be positive")
    if cfg.logging.level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {cfg.logging.level!r}")


def _merge_env_overrides(cfg: RulesyncConfig) -> None:
    """Apply RULESYNC_* environment variable overrides."""
    if val := os.environ.get("RULESYNC_REDIS_URL"):
        cfg.source.redis_url = val
    if val := os.environ.get("RULESYNC_SOURCE_KEY"):
        cfg.source.key = val
    if val := os.environ.get("RULESYNC_RELOAD_URL"):
        cfg.reload.url = val
    if val := os.environ.get("RULESYNC_INTERVAL"):
        try:
            interval = float(val)
        except ValueError:
            interval = 0
        if interval > 0:
            cfg.schedule.interval = interval
    if val := os.environ.get("RULESYNC_LOG_LEVEL"):
        if val.lower() in LOG_LEVELS:
            cfg.logging.level = val.lower()


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> RulesyncConfig:
    """Load, validate, and return a RulesyncConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = RulesyncConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = RulesyncConfig(
            version=raw.get("version", "1.0"),
            source=_build_section(raw, SourceConfig, "source"),
            rules=_build_section(raw, RulesConfig, "rules"),
            reload=_build_section(raw, ReloadConfig, "reload"),
            schedule=_build_section(raw, ScheduleConfig, "schedule"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
