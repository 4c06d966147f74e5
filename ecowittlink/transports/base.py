from __future__ import annotations

from abc import ABC, abstractmethod


class TransportError(ConnectionError):
    """Connecting to, writing to or reading from the gateway failed."""


class Connection(ABC):
    @abstractmethod
    def send(self, data: bytes) -> None:
        ...

    @abstractmethod
    def recv(self, max_len: int) -> bytes:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class GatewayTransport(ABC):
    @abstractmethod
    def connect(self, host: str, port: int) -> Connection:
        ...
