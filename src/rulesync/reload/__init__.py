"""Downstream reload triggers."""

from rulesync.reload.notifier import (
    HttpReloadNotifier,
    NullReloadNotifier,
    ReloadNotifier,
    SignalReloadNotifier,
    build_notifier,
)

__all__ = [
    "HttpReloadNotifier",
    "NullReloadNotifier",
    "ReloadNotifier",
    "SignalReloadNotifier",
    "build_notifier",
]
