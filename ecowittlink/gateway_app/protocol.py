"""
Snapshot request protocol.

Consumers publish ``json`` or ``raw`` on the request channel; the answer goes
to the matching ``all_data`` channel, problems go to the error channel.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ecowittlink.domain.observations import ObservationCache, DEFAULT_STALENESS_SECONDS

REQUEST_CHANNEL = "all_data/request"
JSON_CHANNEL = "all_data/json"
RAW_CHANNEL = "all_data/raw"
ERROR_CHANNEL = "all_data/error"

REQUEST_JSON = "json"
REQUEST_RAW = "raw"

NO_DATA = "no_data"
UNSUPPORTED_REQUEST = "unsupported_request"


class RequestError(Exception):
    pass


class StaleDataError(RequestError):
    """No observation recent enough to answer the request."""


class UnsupportedRequestError(RequestError):
    pass


@dataclass(frozen=True)
class Response:
    channel: str
    payload: str | bytes


def respond(
    request: bytes | str,
    cache: ObservationCache,
    now: Optional[float] = None,
    staleness: float = DEFAULT_STALENESS_SECONDS,
) -> Response:
    """
    Answer a snapshot request from the cache.

    Raises:
        StaleDataError: Nothing fresh enough is cached.
        UnsupportedRequestError: The request is neither ``json`` nor ``raw``.
    """
    if isinstance(request, bytes):
        request = request.decode("utf-8", errors="replace")
    request = request.strip()
    now = time.time() if now is None else now

    if request == REQUEST_JSON:
        rendered = cache.render_json(now, staleness)
        if rendered is None:
            raise StaleDataError("no recent data to publish")
        return Response(JSON_CHANNEL, rendered)
    if request == REQUEST_RAW:
        raw = cache.last_raw_frame(now, staleness)
        if raw is None:
            raise StaleDataError("raw data is stale or missing")
        return Response(RAW_CHANNEL, raw)
    raise UnsupportedRequestError(f"data type not supported: {request!r}")


class RequestHandler:
    def __init__(
        self,
        cache: ObservationCache,
        publish: Callable[[str, str | bytes], None],
        logger: logging.Logger,
        staleness: float = DEFAULT_STALENESS_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.publish = publish
        self.logger = logger
        self.staleness = staleness
        self.clock = clock

    def __call__(self, payload: bytes) -> None:
        try:
            response = respond(payload, self.cache, self.clock(), self.staleness)
        except StaleDataError as exc:
            self.logger.warning("snapshot_unavailable", extra={"details": {"error": str(exc)}})
            self.publish(ERROR_CHANNEL, NO_DATA)
        except UnsupportedRequestError as exc:
            self.logger.warning("request_unsupported", extra={"details": {"error": str(exc)}})
            self.publish(ERROR_CHANNEL, UNSUPPORTED_REQUEST)
        else:
            self.publish(response.channel, response.payload)
