"""Tests for wiring the gateway together."""
import logging
from unittest.mock import MagicMock, patch

from ecowittlink.gateway import main, Gateway
from ecowittlink.gateway_app import GatewaySettings
from ecowittlink.gateway_app.protocol import JSON_CHANNEL, REQUEST_CHANNEL
from ecowittlink.transports import TransportError


def _gateway(**overrides):
    publisher = MagicMock()
    transport = MagicMock()
    transport.connect.side_effect = TransportError("unreachable")
    settings = GatewaySettings(interval=30, **overrides)
    return Gateway(settings, logging.getLogger("test.gateway"), publisher=publisher, transport=transport), publisher


def test_cache_publishes_through_publisher():
    gateway, publisher = _gateway()
    gateway.cache.record("light", "1200", now=1.0)
    publisher.publish.assert_called_once_with("light", "1200")


def test_start_subscribes_and_stop_closes():
    gateway, publisher = _gateway()
    gateway.start()
    try:
        publisher.connect.assert_called_once()
        publisher.subscribe.assert_called_once_with(REQUEST_CHANNEL, gateway.requests)
        assert [t.name for t in gateway.jobs.threads] == ["poll-worker"]
    finally:
        gateway.stop()
    publisher.close.assert_called_once()
    assert gateway.jobs.threads == []


def test_request_handler_answers_from_cache():
    gateway, publisher = _gateway()
    gateway.cache.record("light", "1200")
    publisher.publish.reset_mock()
    gateway.requests(b"json")
    publisher.publish.assert_called_once_with(JSON_CHANNEL, '{\n"light": "1200"\n}')


def test_main_exits_when_broker_unreachable(tmp_path):
    with patch("ecowittlink.gateway.MqttPublisher") as publisher_cls:
        publisher_cls.return_value.connect.side_effect = ConnectionError("refused")
        code = main(["--config", str(tmp_path / "absent.conf"), "--foreground"])
    assert code == 1
