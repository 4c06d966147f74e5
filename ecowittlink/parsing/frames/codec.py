"""
Frame codec for the gateway's binary socket API.

Every frame on the wire has the structure:
``[0xFF 0xFF] [command] [size] [payload ...] [checksum]``

``size`` counts everything from ``command`` through ``checksum``. Command frames
and most replies use a one byte ``size``; the live data reply uses two bytes
(big-endian). The checksum is the sum of all bytes from ``command`` through the
end of the payload, modulo 256.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ecowittlink.core.binary import checksum8, read_uint_be

HEADER = b"\xff\xff"
HEADER_SIZE = len(HEADER)

# A single size byte bounds command + size + payload + checksum to 0xFF.
MAX_COMMAND_PAYLOAD = 0xFF - 3


class Command(IntEnum):
    WRITE_SSID = 0x11
    BROADCAST = 0x12
    READ_ECOWITT = 0x1E
    WRITE_ECOWITT = 0x1F
    READ_WUNDERGROUND = 0x20
    WRITE_WUNDERGROUND = 0x21
    READ_WOW = 0x22
    WRITE_WOW = 0x23
    READ_WEATHERCLOUD = 0x24
    WRITE_WEATHERCLOUD = 0x25
    READ_STATION_MAC = 0x26
    GW1000_LIVEDATA = 0x27
    GET_SOILHUMIAD = 0x28
    SET_SOILHUMIAD = 0x29
    READ_CUSTOMIZED = 0x2A
    WRITE_CUSTOMIZED = 0x2B
    GET_MULCH_OFFSET = 0x2C
    SET_MULCH_OFFSET = 0x2D
    GET_PM25_OFFSET = 0x2E
    SET_PM25_OFFSET = 0x2F
    READ_SSSS = 0x30
    WRITE_SSSS = 0x31
    READ_RAINDATA = 0x34
    WRITE_RAINDATA = 0x35
    READ_GAIN = 0x36
    WRITE_GAIN = 0x37
    READ_CALIBRATION = 0x38
    WRITE_CALIBRATION = 0x39
    READ_SENSOR_ID = 0x3A
    WRITE_SENSOR_ID = 0x3B
    READ_SENSOR_ID_NEW = 0x3C
    WRITE_REBOOT = 0x40
    WRITE_RESET = 0x41
    WRITE_UPDATE = 0x43
    READ_FIRMWARE_VERSION = 0x50
    READ_USR_PATH = 0x51
    WRITE_USR_PATH = 0x52
    GET_CO2_OFFSET = 0x53
    SET_CO2_OFFSET = 0x54
    READ_RSTRAIN_TIME = 0x55
    WRITE_RSTRAIN_TIME = 0x56


class FrameError(ValueError):
    """Base class for malformed or unbuildable frames."""


class InvalidHeaderError(FrameError):
    pass


class InvalidChecksumError(FrameError):
    pass


class InvalidLengthError(FrameError):
    pass


class PayloadTooLargeError(FrameError):
    pass


@dataclass(frozen=True)
class InboundFrame:
    command: int
    length: int
    payload: bytes
    checksum: int
    raw: bytes


def validate_inbound(buffer: bytes, size_width: int = 2) -> InboundFrame:
    """
    Validate a received frame and expose its payload.

    Args:
        buffer: The bytes received from the gateway. Trailing bytes past the
            declared length are ignored.
        size_width: Width of the size field, 2 for the live data reply and 1
            for command frames.

    Returns:
        The validated ``InboundFrame``.

    Raises:
        InvalidHeaderError: The buffer does not start with ``0xFF 0xFF``.
        InvalidLengthError: The buffer is shorter than the declared length.
        InvalidChecksumError: The checksum byte does not match.
    """
    if size_width not in (1, 2):
        raise ValueError("size_width must be 1 or 2")
    buffer = bytes(buffer)
    if buffer[:HEADER_SIZE] != HEADER:
        raise InvalidHeaderError(f"invalid header: 0x{buffer[:HEADER_SIZE].hex().upper() or '<empty>'}")

    payload_start = HEADER_SIZE + 1 + size_width
    if len(buffer) < payload_start + 1:
        raise InvalidLengthError(f"frame too short: {len(buffer)} bytes")

    length = read_uint_be(buffer, HEADER_SIZE + 1, size_width)
    if length < payload_start - 1:
        raise InvalidLengthError(f"declared length {length} is smaller than the frame overhead")
    if len(buffer) < length + 2:
        raise InvalidLengthError(f"declared length {length} exceeds received {len(buffer)} bytes")

    expected = checksum8(buffer[HEADER_SIZE: length + 1])
    actual = buffer[length + 1]
    if expected != actual:
        raise InvalidChecksumError(f"invalid checksum: expected 0x{expected:02X}, got 0x{actual:02X}")

    return InboundFrame(
        command=buffer[HEADER_SIZE],
        length=length,
        payload=buffer[payload_start: length + 1],
        checksum=actual,
        raw=buffer[: length + 2],
    )


def build_command(command: int, payload: bytes = b"") -> bytes:
    """
    Build an outbound command frame.

    Args:
        command: The command id (see ``Command``).
        payload: Optional command payload.

    Returns:
        The complete frame, ``len(payload) + 5`` bytes long.

    Raises:
        PayloadTooLargeError: The payload does not fit a one byte size field.
    """
    payload = bytes(payload)
    if len(payload) >= MAX_COMMAND_PAYLOAD:
        raise PayloadTooLargeError(
            f"payload of {len(payload)} bytes is too long (max is {MAX_COMMAND_PAYLOAD - 1})"
        )
    if not 0 <= int(command) <= 0xFF:
        raise ValueError("command must fit in one byte")
    body = bytes([int(command), 3 + len(payload)]) + payload
    return HEADER + body + bytes([checksum8(body)])


def live_data_query() -> bytes:
    return build_command(Command.GW1000_LIVEDATA)


def expected_frame_size(buffer: bytes, size_width: int = 2) -> int | None:
    """Total wire size announced by a partial frame, or ``None`` if not known yet."""
    if len(buffer) < HEADER_SIZE + 1 + size_width:
        return None
    return read_uint_be(buffer, HEADER_SIZE + 1, size_width) + 2
