from __future__ import annotations

import base64
import time
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException

from ecowittlink.domain.observations import ObservationCache
from ecowittlink.gateway_app.config import GatewaySettings
from ecowittlink.gateway_app.logging import RingBufferHandler
from ecowittlink.gateway_app.models import EventsResponse, HealthResponse, RawSnapshotResponse, SnapshotResponse
from ecowittlink.gateway_app.protocol import NO_DATA


def create_app(
    settings: GatewaySettings,
    cache: ObservationCache,
    events: Optional[RingBufferHandler] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    app = FastAPI(title="ecowittlink gateway")

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        now = clock()
        observations = cache.observations()
        fresh = sum(1 for o in observations.values() if o.is_fresh(now, settings.staleness_seconds))
        return HealthResponse(
            gateway=f"{settings.weather_host}:{settings.weather_port}",
            last_update=cache.last_update(),
            channels_total=len(observations),
            channels_fresh=fresh,
        )

    @app.get("/snapshot/json", response_model=SnapshotResponse)
    def snapshot_json() -> SnapshotResponse:
        now = clock()
        snapshot = cache.render_snapshot(now, settings.staleness_seconds)
        if snapshot is None:
            raise HTTPException(status_code=404, detail=NO_DATA)
        return SnapshotResponse(readings=snapshot, rendered_at=now)

    @app.get("/snapshot/raw", response_model=RawSnapshotResponse)
    def snapshot_raw() -> RawSnapshotResponse:
        now = clock()
        raw = cache.last_raw_frame(now, settings.staleness_seconds)
        if raw is None:
            raise HTTPException(status_code=404, detail=NO_DATA)
        return RawSnapshotResponse(
            payload_b64=base64.b64encode(raw).decode("ascii"),
            payload_hex=raw.hex(),
            size=len(raw),
            rendered_at=now,
        )

    @app.get("/events", response_model=EventsResponse)
    def recent_events() -> EventsResponse:
        return EventsResponse(events=events.get_events() if events else [])

    return app
