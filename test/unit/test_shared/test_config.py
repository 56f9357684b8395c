"""
Tests for settings loading: defaults, settings.json, environment and CLI.
"""

import json

import pytest

from whiteboard.shared.config import Settings, load_settings
from whiteboard.shared.constants import DEFAULT_PEERS, DEFAULT_PORT
from whiteboard.shared.peers import Endpoint


@pytest.fixture
def missing_file(tmp_path):
    return tmp_path / "missing.json"


def test_defaults(missing_file):
    settings = load_settings([], environ={}, path=missing_file)
    assert settings.port == DEFAULT_PORT
    assert settings.peers == [Endpoint(h, p) for h, p in DEFAULT_PEERS]
    assert settings.self_endpoint == Endpoint(settings.host, DEFAULT_PORT)
    assert settings.log_level == "INFO"


def test_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "port": 6000,
                "host": "10.0.0.2",
                "peers": ["10.0.0.2:6000", {"host": "10.0.0.3", "port": 6000}, ["10.0.0.4", 6001]],
                "log_level": "debug",
            }
        ),
        encoding="utf-8",
    )
    settings = load_settings([], environ={}, path=path)
    assert settings.port == 6000
    assert settings.host == "10.0.0.2"
    assert settings.peers == [Endpoint("10.0.0.2", 6000), Endpoint("10.0.0.3", 6000), Endpoint("10.0.0.4", 6001)]
    assert settings.log_level == "DEBUG"


def test_env_overrides_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"port": 6000}), encoding="utf-8")
    env = {"WHITEBOARD_PORT": "7000", "WHITEBOARD_PEERS": "a:1, b:2"}
    settings = load_settings([], environ=env, path=path)
    assert settings.port == 7000
    assert settings.peers == [Endpoint("a", 1), Endpoint("b", 2)]


def test_cli_overrides_env(missing_file):
    env = {"WHITEBOARD_PORT": "7000", "WHITEBOARD_HOST": "envhost"}
    settings = load_settings(
        ["-p", "8000", "--peer", "x:1", "--peer", "y:2", "--log-level", "warning"],
        environ=env,
        path=missing_file,
    )
    assert settings.port == 8000
    assert settings.host == "envhost"
    assert settings.peers == [Endpoint("x", 1), Endpoint("y", 2)]
    assert settings.log_level == "WARNING"


def test_invalid_env_values_keep_defaults(missing_file, caplog):
    env = {"WHITEBOARD_PORT": "not-a-number", "WHITEBOARD_PEERS": "broken", "WHITEBOARD_LOG_LEVEL": "loud"}
    settings = load_settings([], environ=env, path=missing_file)
    defaults = Settings()
    assert settings.port == defaults.port
    assert settings.peers == defaults.peers
    assert settings.log_level == defaults.log_level
    assert len([r for r in caplog.records if r.levelname == "WARNING"]) == 3


def test_unreadable_settings_file_is_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings([], environ={}, path=path).port == DEFAULT_PORT


def test_invalid_cli_port_is_a_usage_error(missing_file):
    with pytest.raises(SystemExit):
        load_settings(["--port", "99999"], environ={}, path=missing_file)


def test_default_settings_file_follows_working_directory(tmp_path, monkeypatch):
    first = tmp_path / "first"
    second = tmp_path / "second"
    for directory, port in ((first, 6001), (second, 6002)):
        directory.mkdir()
        (directory / "settings.json").write_text(json.dumps({"port": port}), encoding="utf-8")

    monkeypatch.chdir(first)
    assert load_settings([], environ={}).port == 6001
    monkeypatch.chdir(second)
    assert load_settings([], environ={}).port == 6002
