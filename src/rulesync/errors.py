"""Exception hierarchy shared by every layer."""

from __future__ import annotations


class RulesyncError(Exception):
    """Base class for all rulesync errors."""


class ConfigError(RulesyncError):
    """Raised when config is malformed or unreadable."""


class FetchError(RulesyncError):
    """Raised when the rule source is unreachable or returns garbage."""


class RecordValidationError(RulesyncError):
    """Raised for a single raw record that cannot become a rule."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name or '<unnamed>'}: {reason}")
        self.name = name
        self.reason = reason


class ParseError(RulesyncError):
    """Raised when a rule file is not a well-formed rule groups document."""


class PersistError(RulesyncError):
    """Raised when the rule file cannot be written."""


class ReloadError(RulesyncError):
    """Raised when the downstream reload trigger fails."""
