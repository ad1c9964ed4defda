"""Logging setup tests: structlog writes to stderr only."""

import json

import structlog

from usergate.log import configure_logging


def test_logs_go_to_stderr(capsys):
    configure_logging("INFO")
    structlog.get_logger().info("usergate.test_event", user_id="u1")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "usergate.test_event" in captured.err
    assert "user_id=u1" in captured.err


def test_level_filters_lower_entries(capsys):
    configure_logging("WARNING")
    structlog.get_logger().info("usergate.quiet")
    structlog.get_logger().warning("usergate.loud")

    err = capsys.readouterr().err
    assert "usergate.quiet" not in err
    assert "usergate.loud" in err


def test_json_logs(capsys):
    configure_logging("INFO", json_logs=True)
    structlog.get_logger().info("usergate.test_event", user_id="u1")

    entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert entry["event"] == "usergate.test_event"
    assert entry["user_id"] == "u1"
    assert entry["level"] == "info"
