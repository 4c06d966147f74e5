import logging
import threading
import time
from typing import Callable, List, Optional

from ecowittlink.core.binary import hexdump
from ecowittlink.domain.observations import ObservationCache
from ecowittlink.gateway_app.config import GatewaySettings
from ecowittlink.parsing.frames import FrameError, live_data_query, validate_inbound
from ecowittlink.parsing.tags import TagStreamResult, publish_payload
from ecowittlink.transports.base import GatewayTransport, TransportError


class JobManager:
    def __init__(self):
        self.threads: List[threading.Thread] = []
        self.stop_event = threading.Event()

    def start(self, target: Callable[[threading.Event], None], name: str) -> threading.Thread:
        thread = threading.Thread(target=target, args=(self.stop_event,), name=name, daemon=True)
        thread.start()
        self.threads.append(thread)
        return thread

    def stop(self, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        for thread in self.threads:
            thread.join(timeout)
        self.threads.clear()


class PollWorker:
    """Queries the gateway for live data, decodes the reply and records the readings."""

    def __init__(
        self,
        settings: GatewaySettings,
        transport: GatewayTransport,
        cache: ObservationCache,
        logger: logging.Logger,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.cache = cache
        self.logger = logger
        self.clock = clock
        self.query = live_data_query()

    def fetch(self) -> bytes:
        with self.transport.connect(self.settings.weather_host, self.settings.weather_port) as conn:
            conn.send(self.query)
            return conn.recv(self.settings.recv_buffer_size)

    def poll_once(self) -> Optional[TagStreamResult]:
        try:
            reply = self.fetch()
        except TransportError as exc:
            self.logger.error(
                "transport_failed",
                extra={"details": {"host": self.settings.weather_host, "port": self.settings.weather_port, "error": str(exc)}},
            )
            return None

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("frame_received", extra={"details": {"size": len(reply), "hex": hexdump(reply)}})

        try:
            frame = validate_inbound(reply)
        except FrameError as exc:
            self.logger.warning(
                "frame_invalid", extra={"details": {"kind": type(exc).__name__, "error": str(exc)}}
            )
            return None

        now = self.clock()
        self.cache.store_raw(frame.payload, now)
        result = publish_payload(frame.payload, self.cache, now)
        for descriptor in result.skipped:
            self.logger.debug(
                "tag_skipped", extra={"details": {"tag": f"0x{descriptor.tag:02X}", "variant": descriptor.variant.label}}
            )
        if result.error is not None:
            self.logger.warning(
                "tag_stream_stopped",
                extra={
                    "details": {
                        "kind": type(result.error).__name__,
                        "error": str(result.error),
                        "decoded": len(result.readings),
                    }
                },
            )
        else:
            self.logger.info("frame_decoded", extra={"details": {"readings": len(result.readings)}})
        return result

    def run(self, stop_event: threading.Event) -> None:
        interval = self.settings.interval
        while not stop_event.is_set():
            try:
                self.poll_once()
            except Exception as exc:
                self.logger.exception("poll_failed", extra={"details": {"error": str(exc)}})
            stop_event.wait(interval)
