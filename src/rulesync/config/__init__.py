"""Configuration loading, schema, and defaults."""

from rulesync.config.loader import load_config
from rulesync.config.schema import RulesyncConfig
from rulesync.errors import ConfigError

__all__ = [
    "ConfigError",
    "RulesyncConfig",
    "load_config",
]
