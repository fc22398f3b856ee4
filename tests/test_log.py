"""Tests for logging configuration."""

import json

from rulesync.log import configure_logging, get_logger


def test_json_lines_to_stderr(capsys):
    configure_logging("info", json=True)
    get_logger("test").info("rules_applied", added=2)
    out, err = capsys.readouterr()
    assert out == ""
    record = json.loads(err.strip().splitlines()[-1])
    assert record["event"] == "rules_applied"
    assert record["added"] == 2
    assert record["level"] == "info"
    assert record["logger_name"] == "test"


def test_level_filtering(capsys):
    configure_logging("error")
    log = get_logger("test")
    log.info("quiet")
    log.error("loud")
    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "loud" in err
