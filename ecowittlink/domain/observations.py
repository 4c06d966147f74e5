from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ecowittlink.parsing.tags.registry import TagDescriptor, TAG_REGISTRY

DEFAULT_STALENESS_SECONDS = 60.0

PublishCallback = Callable[[str, str], None]


@dataclass(frozen=True)
class Observation:
    value: Optional[str] = None
    updated_at: Optional[float] = None

    def is_fresh(self, now: float, staleness: float) -> bool:
        return self.value is not None and self.updated_at is not None and now - self.updated_at <= staleness


class ObservationCache:
    """
    Last decoded value per channel plus the last validated raw payload.

    Written by the poll worker and read from the MQTT and status API threads.
    A single lock guards all state; readers only ever receive copies.
    """

    def __init__(
        self,
        registry: dict[int, TagDescriptor] | None = None,
        publish: Optional[PublishCallback] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        registry = TAG_REGISTRY if registry is None else registry
        self._publish = publish
        self._clock = clock
        self._lock = threading.Lock()
        self._observations: dict[str, Observation] = {d.channel: Observation() for d in registry.values()}
        self._raw: Optional[bytes] = None
        self._raw_updated_at: Optional[float] = None

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    def record(self, channel: str, value: str, now: Optional[float] = None) -> None:
        now = self._now(now)
        with self._lock:
            previous = self._observations.get(channel)
            if previous is not None and previous.updated_at is not None:
                now = max(now, previous.updated_at)
            self._observations[channel] = Observation(value=value, updated_at=now)
        if self._publish is not None:
            self._publish(channel, value)

    def store_raw(self, payload: bytes, now: Optional[float] = None) -> None:
        now = self._now(now)
        with self._lock:
            if self._raw_updated_at is not None:
                now = max(now, self._raw_updated_at)
            self._raw = bytes(payload)
            self._raw_updated_at = now

    def get(self, channel: str) -> Optional[Observation]:
        with self._lock:
            return self._observations.get(channel)

    def observations(self) -> dict[str, Observation]:
        with self._lock:
            return dict(self._observations)

    def render_snapshot(
        self, now: Optional[float] = None, staleness: float = DEFAULT_STALENESS_SECONDS
    ) -> Optional[dict[str, str]]:
        """Fresh values by channel, or ``None`` when nothing is fresh."""
        now = self._now(now)
        with self._lock:
            snapshot = {
                channel: observation.value
                for channel, observation in self._observations.items()
                if observation.is_fresh(now, staleness)
            }
        return snapshot or None

    def render_json(self, now: Optional[float] = None, staleness: float = DEFAULT_STALENESS_SECONDS) -> Optional[str]:
        snapshot = self.render_snapshot(now, staleness)
        if snapshot is None:
            return None
        return json.dumps(snapshot, indent=0)

    def last_raw_frame(
        self, now: Optional[float] = None, staleness: float = DEFAULT_STALENESS_SECONDS
    ) -> Optional[bytes]:
        now = self._now(now)
        with self._lock:
            if not self._raw or self._raw_updated_at is None:
                return None
            if now - self._raw_updated_at > staleness:
                return None
            return self._raw

    def last_update(self) -> Optional[float]:
        with self._lock:
            stamps = [o.updated_at for o in self._observations.values() if o.updated_at is not None]
            return max(stamps) if stamps else None
