from ecowittlink.domain import ObservationCache
from ecowittlink.gateway_app import create_app, load_settings, GatewaySettings
from ecowittlink.gateway import Gateway
from ecowittlink.parsing.frames import build_command, validate_inbound
from ecowittlink.parsing.tags import parse_payload, TAG_REGISTRY
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "Gateway",
    "ObservationCache",
    "build_command",
    "validate_inbound",
    "parse_payload",
    "create_app",
    "load_settings",
    "GatewaySettings",
    "TAG_REGISTRY",
]

try:
    __version__ = version("ecowittlink")
except PackageNotFoundError:
    __version__ = "0.0.0"
