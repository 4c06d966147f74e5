"""
Frame codec for the gateway socket API.

Validates inbound frames (header, declared length, checksum) and builds
outbound command frames with their checksum.
"""
from ecowittlink.parsing.frames.codec import (
    build_command,
    expected_frame_size,
    live_data_query,
    validate_inbound,
    Command,
    FrameError,
    InboundFrame,
    InvalidChecksumError,
    InvalidHeaderError,
    InvalidLengthError,
    PayloadTooLargeError,
    MAX_COMMAND_PAYLOAD,
)

__all__ = [
    "build_command",
    "expected_frame_size",
    "live_data_query",
    "validate_inbound",
    "Command",
    "FrameError",
    "InboundFrame",
    "InvalidChecksumError",
    "InvalidHeaderError",
    "InvalidLengthError",
    "PayloadTooLargeError",
    "MAX_COMMAND_PAYLOAD",
]
