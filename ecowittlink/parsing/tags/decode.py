"""
Value decoders for tagged payload items.

All multi-byte values are big-endian. Decoded values are rendered as the
strings that get published, e.g. ``"21.4"`` for a scaled temperature.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from ecowittlink.core.binary import get_bit, read_uint_be
from ecowittlink.parsing.tags.registry import DecodeVariant, TagDescriptor, RESERVED_VARIANTS

BATTERY_PREFIX = "battery"
BATTERY_SCALE = 0.02

_RAW_WIDTHS = {
    DecodeVariant.BYTE_RAW: 1,
    DecodeVariant.SHORT_RAW: 2,
    DecodeVariant.TRIPLE_RAW: 3,
    DecodeVariant.INT_RAW: 4,
}


class Reading(NamedTuple):
    channel: str
    value: str


def signed_short(data: bytes) -> int:
    # High bit set means negative, offset by 0xFFFF (not 0x10000) as the gateway does.
    value = read_uint_be(data, 0, 2)
    if data[0] & 0x80:
        value -= 0xFFFF
    return value


def render_bitmask(data: bytes) -> str:
    """Render each byte most-significant bit first, bytes in ascending order."""
    return "".join("1" if get_bit(byte, bit) else "0" for byte in data for bit in range(7, -1, -1))


def battery_channel(channel: str) -> str:
    return f"{BATTERY_PREFIX}/{channel.rsplit('/', 1)[-1]}"


def decode_value(variant: DecodeVariant, data: bytes) -> Optional[str]:
    """
    Decode a single-valued variant.

    Args:
        variant: The decode variant of the tag.
        data: The value bytes following the tag id, at least ``variant.width`` long.

    Returns:
        The display value, or ``None`` for reserved variants.

    Raises:
        ValueError: ``data`` is shorter than the variant width, or the variant
            has no fixed width.
    """
    if variant.width is None:
        raise ValueError(f"variant {variant.label} has no fixed width")
    if len(data) < variant.width:
        raise ValueError(f"variant {variant.label} needs {variant.width} bytes, got {len(data)}")

    if variant in _RAW_WIDTHS:
        return str(read_uint_be(data, 0, _RAW_WIDTHS[variant]))
    if variant is DecodeVariant.SHORT_SCALED_UNSIGNED:
        return f"{read_uint_be(data, 0, 2) / 10.0:.1f}"
    if variant in (DecodeVariant.SHORT_SCALED_SIGNED, DecodeVariant.TEMP_AND_BATTERY):
        return f"{signed_short(data) / 10.0:.1f}"
    if variant is DecodeVariant.BITMASK_16:
        return render_bitmask(data[:16])
    if variant in RESERVED_VARIANTS:
        return None
    raise ValueError(f"unhandled variant {variant.label}")


def decode_tag(descriptor: TagDescriptor, data: bytes) -> list[Reading]:
    """
    Decode one tag's value bytes into the readings it publishes.

    ``temp-and-battery`` yields the battery level on a derived channel followed
    by the temperature on the tag's own channel. Reserved variants yield nothing.
    """
    value = decode_value(descriptor.variant, data)
    if value is None:
        return []
    readings = []
    if descriptor.variant is DecodeVariant.TEMP_AND_BATTERY:
        readings.append(Reading(battery_channel(descriptor.channel), f"{data[2] * BATTERY_SCALE:.2f}"))
    readings.append(Reading(descriptor.channel, value))
    return readings
