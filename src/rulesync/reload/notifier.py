"""Reload notifiers — tell the monitoring process to re-read its rules.

All of them are best-effort triggers: success means the request was
delivered, not that the reload finished.
"""

from __future__ import annotations

import os
import signal
from pathlib import Path
from typing import Optional, Protocol

import httpx

from rulesync.config.schema import ReloadConfig
from rulesync.errors import ReloadError


class ReloadNotifier(Protocol):
    def notify(self) -> None:
        """Trigger a reload. Raises ReloadError."""
        ...


class HttpReloadNotifier:
    """Hit the lifecycle endpoint, e.g. Prometheus ``/-/reload``."""

    def __init__(self, url: str, *, method: str = "POST", timeout: float = 3.0) -> None:
        self.url = url
        self.method = method.upper()
        self.timeout = timeout

    def notify(self) -> None:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(self.method, self.url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ReloadError(f"{self.method} {self.url}: {exc}") from exc
        if response.is_error:
            raise ReloadError(
                f"{self.method} {self.url}: HTTP {response.status_code} {response.text.strip()}"
            )


class SignalReloadNotifier:
    """Send a signal (SIGHUP by default) to a pid or to the pid in a pidfile."""

    def __init__(
        self,
        *,
        pid: Optional[int] = None,
        pid_file: Optional[Path] = None,
        signum: int = signal.SIGHUP,
    ) -> None:
        if pid is None and pid_file is None:
            raise ValueError("either pid or pid_file is required")
        self.pid = pid
        self.pid_file = pid_file
        self.signum = signum

    def _target_pid(self) -> int:
        if self.pid is not None:
            return self.pid
        assert self.pid_file is not None
        try:
            return int(self.pid_file.read_text(encoding="utf-8").strip())
        except OSError as exc:
            raise ReloadError(f"cannot read pid file {self.pid_file}: {exc}") from exc
        except ValueError as exc:
            raise ReloadError(f"pid file {self.pid_file} does not hold a pid") from exc

    def notify(self) -> None:
        pid = self._target_pid()
        try:
            os.kill(pid, self.signum)
        except OSError as exc:
            raise ReloadError(f"cannot signal pid {pid}: {exc}") from exc


class NullReloadNotifier:
    """For setups where the monitoring process watches the file itself."""

    def notify(self) -> None:
        return None


def build_notifier(cfg: ReloadConfig) -> ReloadNotifier:
    """Create the notifier named by ``cfg.kind``."""
    if cfg.kind == "http":
        return HttpReloadNotifier(cfg.url, method=cfg.method, timeout=cfg.timeout)
    if cfg.kind == "signal":
        return SignalReloadNotifier(
            pid=cfg.pid,
            pid_file=Path(cfg.pid_file) if cfg.pid_file else None,
        )
    if cfg.kind == "none":
        return NullReloadNotifier()
    raise ValueError(f"unknown reload kind: {cfg.kind!r}")
