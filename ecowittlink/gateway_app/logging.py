import logging
import logging.handlers
import os
import sys
import threading
from collections import deque
from typing import Deque, Dict, List, Optional

SYSLOG_SOCKET = "/dev/log"


class RingBufferHandler(logging.Handler):
    def __init__(self, max_entries: int = 200):
        super().__init__()
        self.max_entries = max_entries
        self._events: Deque[Dict] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        event = {
            "event": record.getMessage(),
            "level": record.levelname,
            "ts": record.created,
            "details": redact(getattr(record, "details", {})),
        }
        with self._lock:
            self._events.append(event)

    def resize(self, max_entries: int) -> None:
        with self._lock:
            self.max_entries = max_entries
            self._events = deque(self._events, maxlen=max_entries)

    def get_events(self) -> List[Dict]:
        with self._lock:
            return list(self._events)


class DetailsFormatter(logging.Formatter):
    """Appends the structured ``details`` of a record to the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        details = redact(getattr(record, "details", {}))
        if details:
            message += " " + " ".join(f"{key}={value}" for key, value in details.items())
        return message


def create_logger(name: str, ring_size: int, foreground: bool = True, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(RingBufferHandler(max_entries=ring_size))

    if foreground:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(DetailsFormatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
    elif os.path.exists(SYSLOG_SOCKET):
        handler = logging.handlers.SysLogHandler(
            address=SYSLOG_SOCKET, facility=logging.handlers.SysLogHandler.LOG_DAEMON
        )
        handler.setFormatter(DetailsFormatter(f"{name}[{os.getpid()}]: %(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def ring_buffer(logger: logging.Logger) -> Optional[RingBufferHandler]:
    for handler in logger.handlers:
        if isinstance(handler, RingBufferHandler):
            return handler
    return None


def redact(details: Optional[dict]) -> dict:
    if not details:
        return {}
    redacted_keys = {"broker_password", "password"}
    cleaned = {}
    for key, value in details.items():
        if key in redacted_keys and value is not None:
            cleaned[key] = "***"
        else:
            cleaned[key] = value
    return cleaned
