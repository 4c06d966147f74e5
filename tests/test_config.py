"""Tests for settings and the key = value config file."""
import logging

import pytest

from ecowittlink.gateway_app.config import load_settings, read_config_file, GatewaySettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in GatewaySettings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


def test_defaults():
    settings = GatewaySettings()
    assert settings.weather_host == "127.0.0.1"
    assert settings.weather_port == 45000
    assert settings.interval == 30
    assert settings.broker_host == "localhost"
    assert settings.broker_port == 1883
    assert settings.client_id == "ecowitt2mqtt"
    assert settings.base_topic == "ecowitt"
    assert settings.staleness_seconds == 60


def test_missing_file_keeps_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.conf")
    assert settings == GatewaySettings()


def test_no_path_keeps_defaults():
    assert load_settings(None).weather_port == 45000


def test_read_config_file(tmp_path):
    path = tmp_path / "gw.conf"
    path.write_text("# gateway\nhost = 192.168.1.20\n\nport=45001  # live port\nbase_topic = 'wx'\nnonsense\n")
    assert read_config_file(path) == {"host": "192.168.1.20", "port": "45001", "base_topic": "wx"}


def test_legacy_keys_mapped(tmp_path):
    path = tmp_path / "gw.conf"
    path.write_text(
        "host = 192.168.1.20\n"
        "port = 45001\n"
        "interval = 15\n"
        "broker_host = mqtt.lan\n"
        "broker_port = 8883\n"
        "clientid = wx-gw\n"
        "base_topic = weather\n"
    )
    settings = load_settings(path)
    assert settings.weather_host == "192.168.1.20"
    assert settings.weather_port == 45001
    assert settings.interval == 15
    assert settings.broker_host == "mqtt.lan"
    assert settings.broker_port == 8883
    assert settings.client_id == "wx-gw"
    assert settings.base_topic == "weather"


def test_invalid_and_unknown_keys_ignored(tmp_path, caplog):
    path = tmp_path / "gw.conf"
    path.write_text("port = not-a-number\ncolour = blue\ninterval = 5\n")
    with caplog.at_level(logging.WARNING):
        settings = load_settings(path, logger=logging.getLogger("test.config"))
    assert settings.weather_port == 45000
    assert settings.interval == 5
    messages = [record.getMessage() for record in caplog.records]
    assert "config_value_invalid" in messages
    assert "config_key_unknown" in messages


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("BROKER_HOST", "broker.example")
    assert GatewaySettings().broker_host == "broker.example"


def test_file_wins_over_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("WEATHER_HOST", "10.0.0.1")
    path = tmp_path / "gw.conf"
    path.write_text("host = 10.0.0.2\n")
    assert load_settings(path).weather_host == "10.0.0.2"
