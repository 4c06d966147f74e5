from __future__ import annotations

import socket
from typing import Optional

from ecowittlink.parsing.frames import expected_frame_size
from ecowittlink.transports.base import Connection, GatewayTransport, TransportError


class TcpConnection(Connection):
    def __init__(self, sock: socket.socket, size_width: int = 2) -> None:
        self._sock: Optional[socket.socket] = sock
        self.size_width = size_width

    # ---- helpers ----
    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("connection is closed")
        return self._sock

    # ---- Connection ----
    def send(self, data: bytes) -> None:
        try:
            self._socket().sendall(data)
        except OSError as exc:
            raise TransportError(f"send failed: {exc}") from exc

    def recv(self, max_len: int) -> bytes:
        """
        Read one reply frame.

        Reads until the frame's declared size has arrived, the peer closes the
        connection or ``max_len`` bytes are buffered. A timeout before any byte
        arrives is a ``TransportError``; a timeout mid-frame returns what was read
        so the codec can reject it.
        """
        sock = self._socket()
        buf = bytearray()
        while len(buf) < max_len:
            try:
                chunk = sock.recv(max_len - len(buf))
            except socket.timeout as exc:
                if not buf:
                    raise TransportError("timed out waiting for reply") from exc
                break
            except OSError as exc:
                raise TransportError(f"recv failed: {exc}") from exc
            if not chunk:
                break
            buf.extend(chunk)
            expected = expected_frame_size(bytes(buf), self.size_width)
            if expected is not None and len(buf) >= expected:
                break
        if not buf:
            raise TransportError("connection closed before any data was received")
        return bytes(buf)

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None


class TcpTransport(GatewayTransport):
    def __init__(self, timeout: float = 10.0, size_width: int = 2) -> None:
        self.timeout = timeout
        self.size_width = size_width

    def connect(self, host: str, port: int) -> TcpConnection:
        try:
            sock = socket.create_connection((host, port), timeout=self.timeout)
        except OSError as exc:
            raise TransportError(f"connect to {host}:{port} failed: {exc}") from exc
        return TcpConnection(sock, size_width=self.size_width)
