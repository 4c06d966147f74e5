"""Tests for the HTTP status API."""
import base64
import logging

import pytest
from fastapi.testclient import TestClient

from ecowittlink.domain import ObservationCache
from ecowittlink.gateway_app import create_app, GatewaySettings
from ecowittlink.gateway_app.logging import RingBufferHandler

NOW = 2000.0


@pytest.fixture
def cache():
    return ObservationCache()


@pytest.fixture
def events():
    return RingBufferHandler(max_entries=10)


@pytest.fixture
def client(cache, events):
    app = create_app(GatewaySettings(weather_host="10.0.0.5"), cache, events=events, clock=lambda: NOW)
    return TestClient(app)


def test_health_without_data(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["gateway"] == "10.0.0.5:45000"
    assert body["last_update"] is None
    assert body["channels_fresh"] == 0
    assert body["channels_total"] > 0


def test_snapshot_json_no_data(client):
    resp = client.get("/snapshot/json")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "no_data"


def test_snapshot_json(client, cache):
    cache.record("temperature/indoors", "21.0", now=NOW - 5)
    cache.record("humidity/indoors", "45", now=NOW - 120)
    resp = client.get("/snapshot/json")
    assert resp.status_code == 200
    assert resp.json()["readings"] == {"temperature/indoors": "21.0"}


def test_snapshot_raw(client, cache):
    cache.store_raw(b"\x06\x2d", now=NOW)
    resp = client.get("/snapshot/raw")
    assert resp.status_code == 200
    body = resp.json()
    assert base64.b64decode(body["payload_b64"]) == b"\x06\x2d"
    assert body["payload_hex"] == "062d"
    assert body["size"] == 2


def test_snapshot_raw_stale(client, cache):
    cache.store_raw(b"\x06\x2d", now=NOW - 61)
    assert client.get("/snapshot/raw").status_code == 404


def test_events(client, events):
    logger = logging.getLogger("test.status_api")
    logger.addHandler(events)
    try:
        logger.warning("frame_invalid", extra={"details": {"kind": "InvalidChecksumError"}})
    finally:
        logger.removeHandler(events)
    body = client.get("/events").json()
    assert body["events"][-1]["event"] == "frame_invalid"
    assert body["events"][-1]["details"] == {"kind": "InvalidChecksumError"}
