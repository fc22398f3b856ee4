"""Tests for reload notifiers."""

import os
import signal
from pathlib import Path

import httpx
import pytest
import respx

from rulesync.config.schema import ReloadConfig
from rulesync.errors import ReloadError
from rulesync.reload.notifier import (
    HttpReloadNotifier,
    NullReloadNotifier,
    SignalReloadNotifier,
    build_notifier,
)

RELOAD_URL = "http://127.0.0.1:9090/-/reload"


class TestHttpReloadNotifier:
    def test_posts_to_endpoint(self):
        with respx.mock:
            route = respx.post(RELOAD_URL).respond(200)
            HttpReloadNotifier(RELOAD_URL).notify()
        assert route.called

    def test_configurable_method(self):
        with respx.mock:
            route = respx.get(RELOAD_URL).respond(200)
            HttpReloadNotifier(RELOAD_URL, method="get").notify()
        assert route.called

    def test_error_status(self):
        with respx.mock:
            respx.post(RELOAD_URL).respond(500, text="failed to reload config")
            with pytest.raises(ReloadError, match="500"):
                HttpReloadNotifier(RELOAD_URL).notify()

    def test_connection_refused(self):
        with respx.mock:
            respx.post(RELOAD_URL).mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(ReloadError, match="refused"):
                HttpReloadNotifier(RELOAD_URL).notify()

    def test_malformed_url(self):
        with pytest.raises(ReloadError, match="abc"):
            HttpReloadNotifier("http://127.0.0.1:abc/-/reload").notify()


class TestSignalReloadNotifier:
    def test_signals_pid(self, monkeypatch):
        sent = []
        monkeypatch.setattr(os, "kill", lambda pid, sig: sent.append((pid, sig)))
        SignalReloadNotifier(pid=4242).notify()
        assert sent == [(4242, signal.SIGHUP)]

    def test_reads_pid_file(self, tmp_path: Path, monkeypatch):
        sent = []
        monkeypatch.setattr(os, "kill", lambda pid, sig: sent.append((pid, sig)))
        pid_file = tmp_path / "prometheus.pid"
        pid_file.write_text("1234\n")
        SignalReloadNotifier(pid_file=pid_file).notify()
        assert sent == [(1234, signal.SIGHUP)]

    def test_bad_pid_file(self, tmp_path: Path):
        pid_file = tmp_path / "prometheus.pid"
        pid_file.write_text("not-a-pid")
        with pytest.raises(ReloadError):
            SignalReloadNotifier(pid_file=pid_file).notify()

    def test_missing_pid_file(self, tmp_path: Path):
        with pytest.raises(ReloadError):
            SignalReloadNotifier(pid_file=tmp_path / "absent.pid").notify()

    def test_dead_process(self, monkeypatch):
        def no_such_process(pid, sig):
            raise ProcessLookupError(pid)

        monkeypatch.setattr(os, "kill", no_such_process)
        with pytest.raises(ReloadError, match="4242"):
            SignalReloadNotifier(pid=4242).notify()

    def test_needs_target(self):
        with pytest.raises(ValueError):
            SignalReloadNotifier()


class TestBuildNotifier:
    def test_kinds(self, tmp_path: Path):
        http = build_notifier(ReloadConfig())
        assert isinstance(http, HttpReloadNotifier)
        assert http.url == RELOAD_URL
        assert http.method == "POST"
        assert http.timeout == 3.0

        sig = build_notifier(ReloadConfig(kind="signal", pid_file=str(tmp_path / "p.pid")))
        assert isinstance(sig, SignalReloadNotifier)

        assert isinstance(build_notifier(ReloadConfig(kind="none")), NullReloadNotifier)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_notifier(ReloadConfig(kind="pager"))
