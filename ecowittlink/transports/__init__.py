from ecowittlink.transports.base import Connection, GatewayTransport, TransportError
from ecowittlink.transports.tcp.transport import TcpConnection, TcpTransport

__all__ = ["Connection", "GatewayTransport", "TransportError", "TcpConnection", "TcpTransport"]
