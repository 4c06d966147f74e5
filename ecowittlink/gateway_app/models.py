from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    gateway: str
    last_update: Optional[float] = None
    channels_total: int
    channels_fresh: int


class SnapshotResponse(BaseModel):
    readings: Dict[str, str] = Field(default_factory=dict)
    rendered_at: float


class RawSnapshotResponse(BaseModel):
    payload_b64: str
    payload_hex: str
    size: int
    rendered_at: float


class EventsResponse(BaseModel):
    events: List[Dict[str, Any]] = Field(default_factory=list)
