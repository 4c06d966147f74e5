import argparse
import logging
import signal
import sys
import threading
from typing import Optional

import uvicorn

from ecowittlink.domain import ObservationCache
from ecowittlink.gateway_app import create_app, load_settings, GatewaySettings, JobManager, PollWorker, RequestHandler
from ecowittlink.gateway_app.config import DEFAULT_CONFIG_PATH
from ecowittlink.gateway_app.logging import create_logger, redact, ring_buffer
from ecowittlink.gateway_app.protocol import REQUEST_CHANNEL
from ecowittlink.publishers import MqttPublisher
from ecowittlink.transports import GatewayTransport, TcpTransport

LOGGER_NAME = "ecowittlink"


class Gateway:
    def __init__(
        self,
        settings: GatewaySettings,
        logger: logging.Logger,
        publisher: Optional[MqttPublisher] = None,
        transport: Optional[GatewayTransport] = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.publisher = publisher or MqttPublisher(settings, logger)
        self.cache = ObservationCache(publish=self.publisher.publish)
        self.worker = PollWorker(
            settings, transport or TcpTransport(timeout=settings.recv_timeout), self.cache, logger
        )
        self.requests = RequestHandler(
            self.cache, self.publisher.publish, logger, staleness=settings.staleness_seconds
        )
        self.jobs = JobManager()
        self._status_server: Optional[uvicorn.Server] = None

    def _serve_status(self, stop_event: threading.Event) -> None:
        app = create_app(self.settings, self.cache, events=ring_buffer(self.logger))
        config = uvicorn.Config(
            app, host=self.settings.status_api_host, port=self.settings.status_api_port, log_level="warning"
        )
        self._status_server = uvicorn.Server(config)
        self._status_server.run()

    def start(self) -> None:
        self.publisher.connect()
        self.publisher.subscribe(REQUEST_CHANNEL, self.requests)
        self.jobs.start(self.worker.run, name="poll-worker")
        if self.settings.enable_status_api:
            self.jobs.start(self._serve_status, name="status-api")

    def stop(self) -> None:
        if self._status_server is not None:
            self._status_server.should_exit = True
        self.jobs.stop(timeout=self.settings.recv_timeout + 1)
        self.publisher.close()

    def wait(self) -> None:
        self.jobs.stop_event.wait()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Poll a weather station gateway and publish readings over MQTT.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH, help="Path to the key = value config file.")
    parser.add_argument("--foreground", action="store_true", help="Log to stderr instead of syslog.")
    parser.add_argument("--verbose", action="store_true", help="Log debug events, including received frames.")
    args = parser.parse_args(argv)

    logger = create_logger(LOGGER_NAME, ring_size=200, foreground=args.foreground, verbose=args.verbose)
    settings = load_settings(args.config, logger=logger)
    events = ring_buffer(logger)
    if events is not None:
        events.resize(settings.log_ring_size)
    logger.info("starting", extra={"details": redact(settings.model_dump())})

    gateway = Gateway(settings, logger)
    try:
        gateway.start()
    except ConnectionError as exc:
        logger.error("broker_unreachable", extra={"details": {"error": str(exc)}})
        return 1

    def _shutdown(signum, frame):
        logger.info("stopping", extra={"details": {"signal": signum}})
        gateway.jobs.stop_event.set()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)
    gateway.wait()
    gateway.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
