"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from rulesync.config.defaults import DEFAULT_TOML
from rulesync.config.loader import load_config
from rulesync.errors import ConfigError


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.source.kind == "redis"
        assert cfg.source.key == "CUSTOM_EXPRESS_STRATEGY"
        assert cfg.source.name_field == "alarm_name"
        assert cfg.source.expr_field == "expre"
        assert cfg.reload.url == "http://127.0.0.1:9090/-/reload"
        assert cfg.reload.timeout == 3.0
        assert cfg.schedule.interval == 60.0

    def test_starter_template_loads(self, tmp_path: Path):
        (tmp_path / ".rulesync.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.rules.file_name == "rules.yml"
        assert cfg.logging.level == "info"

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".rulesync.toml").write_text(
            '[source]\n'
            'kind = "file"\n'
            'path = "rules.json"\n'
            'unknown_key = 1\n'
            '[rules]\n'
            'group_name = "custom"\n'
            '[rules.default_labels]\n'
            'team = "ops"\n'
            '[schedule]\n'
            'interval = 15\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.source.kind == "file"
        assert cfg.source.path == "rules.json"
        assert cfg.rules.group_name == "custom"
        assert cfg.rules.default_labels == {"team": "ops"}
        assert cfg.schedule.interval == 15

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[reload]\nkind = "none"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.reload.kind == "none"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".rulesync.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    @pytest.mark.parametrize(
        "body",
        [
            '[source]\nkind = "ftp"\n',
            '[source]\nkind = "file"\n',
            '[source]\nkind = "http"\n',
            '[reload]\nkind = "signal"\n',
            '[reload]\nkind = "carrier"\n',
            '[rules]\ngroup_name = ""\n',
            '[rules.default_labels]\nteam = 1\n',
            '[schedule]\ninterval = 0\n',
            '[logging]\nlevel = "loud"\n',
            'source = "redis"\n',
        ],
    )
    def test_invalid_values_raise(self, tmp_path: Path, body):
        (tmp_path / ".rulesync.toml").write_text(body)
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_redis_url_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RULESYNC_REDIS_URL", "redis://10.0.0.1:6001/2")
        assert load_config(tmp_path).source.redis_url == "redis://10.0.0.1:6001/2"

    def test_key_and_reload_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RULESYNC_SOURCE_KEY", "OTHER_KEY")
        monkeypatch.setenv("RULESYNC_RELOAD_URL", "http://prom:9090/-/reload")
        cfg = load_config(tmp_path)
        assert cfg.source.key == "OTHER_KEY"
        assert cfg.reload.url == "http://prom:9090/-/reload"

    def test_interval_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RULESYNC_INTERVAL", "30")
        assert load_config(tmp_path).schedule.interval == 30.0

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RULESYNC_INTERVAL", "soon")
        monkeypatch.setenv("RULESYNC_LOG_LEVEL", "loud")
        cfg = load_config(tmp_path)
        assert cfg.schedule.interval == 60.0
        assert cfg.logging.level == "info"

    def test_log_level_case_insensitive(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("RULESYNC_LOG_LEVEL", "DEBUG")
        assert load_config(tmp_path).logging.level == "debug"
