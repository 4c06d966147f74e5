"""
Tag registry for the live data payload.

Each item in the payload is a one byte tag followed by a value whose width is
fixed by the tag's decode variant. The registry maps every known tag to its
variant and the channel name its value is published under.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class DecodeVariant(Enum):
    BYTE_RAW = ("byte-raw", 1)
    SHORT_RAW = ("short-raw", 2)
    TRIPLE_RAW = ("triple-raw", 3)
    INT_RAW = ("int-raw", 4)
    SHORT_SCALED_UNSIGNED = ("short-scaled-unsigned", 2)
    SHORT_SCALED_SIGNED = ("short-scaled-signed", 2)
    TEMP_AND_BATTERY = ("temp-and-battery", 3)
    TIME_3 = ("time-3", 3)
    TIME_6 = ("time-6", 6)
    BITMASK_16 = ("bitmask-16", 16)
    CO2_COMPOSITE = ("co2-composite", 16)
    PIEZO_GAIN_20 = ("piezo-gain-20", 20)
    PM25_AQI_VARIABLE = ("pm25-aqi-variable", None)

    def __init__(self, label: str, width: Optional[int]) -> None:
        self.label = label
        self.width = width

    @property
    def is_fixed_width(self) -> bool:
        return self.width is not None


# Variants that occupy bytes in the payload but produce no value.
RESERVED_VARIANTS: frozenset[DecodeVariant] = frozenset(
    {
        DecodeVariant.TIME_3,
        DecodeVariant.TIME_6,
        DecodeVariant.CO2_COMPOSITE,
        DecodeVariant.PIEZO_GAIN_20,
    }
)


@dataclass(frozen=True)
class TagDescriptor:
    tag: int
    variant: DecodeVariant
    channel: str

    @property
    def width(self) -> Optional[int]:
        return self.variant.width


_B = DecodeVariant.BYTE_RAW
_S = DecodeVariant.SHORT_RAW
_I = DecodeVariant.INT_RAW
_SU = DecodeVariant.SHORT_SCALED_UNSIGNED
_SS = DecodeVariant.SHORT_SCALED_SIGNED
_TB = DecodeVariant.TEMP_AND_BATTERY

# (tag, variant, channel) in wire order.
TAG_TABLE: list[tuple[int, DecodeVariant, str]] = [
    (0x01, _SS, "temperature/indoors"),
    (0x02, _SS, "temperature/outdoors"),
    (0x03, _SS, "dew_point"),
    (0x04, _SS, "wind_chill"),
    (0x05, _SS, "heat_index"),
    (0x06, _B, "humidity/indoors"),
    (0x07, _B, "humidity/outdoors"),
    (0x08, _SU, "barometric/absolute"),
    (0x09, _SU, "barometric/relative"),
    (0x0A, _S, "wind/direction"),
    (0x0B, _S, "wind/speed"),
    (0x0C, _S, "wind/gust_speed"),
    (0x0D, _S, "rain/event"),
    (0x0E, _S, "rain/rate"),
    (0x0F, _S, "rain/hour"),
    (0x10, _S, "rain/day"),
    (0x11, _S, "rain/week"),
    (0x12, _I, "rain/month"),
    (0x13, _I, "rain/year"),
    (0x14, _I, "rain/totals"),
    (0x15, _I, "light"),
    (0x16, _S, "uv/intensity"),
    (0x17, _B, "uv/index"),
    (0x18, DecodeVariant.TIME_6, "date_and_time"),
    (0x19, _S, "wind/day_max"),
    *[(0x1A + i, _SS, f"temperature/th_{i + 1}") for i in range(8)],
    *[(0x22 + i, _B, f"humidity/th_{i + 1}") for i in range(8)],
    (0x2A, _S, "air_quality"),
    *[
        entry
        for i in range(16)
        for entry in (
            (0x2B + 2 * i, _SS, f"temperature/soil_{i + 1}"),
            (0x2C + 2 * i, _B, f"moisture/soil_{i + 1}"),
        )
    ],
    (0x4C, DecodeVariant.BITMASK_16, "all_sensor_low_battery"),
    *[(0x4D + i, _S, f"pm25/ch{i + 1}") for i in range(4)],
    *[(0x51 + i, _S, f"aqs/{i + 2}") for i in range(3)],
    *[(0x58 + i, _B, f"leak/{i + 1}") for i in range(4)],
    (0x60, _B, "lightning/distance"),
    (0x61, _I, "lightning/time"),
    (0x62, _I, "lightning/day_counter"),
    *[(0x63 + i, _TB, f"temperature/t{i + 1}") for i in range(8)],
    (0x70, DecodeVariant.CO2_COMPOSITE, "co2"),
    (0x71, DecodeVariant.PM25_AQI_VARIABLE, "aqi"),
    *[(0x72 + i, _B, f"leaf_wetness/{i + 1}") for i in range(8)],
    (0x80, _S, "rain/piezo/rate"),
    (0x81, _S, "rain/piezo/event"),
    (0x82, _S, "rain/piezo/hourly"),
    (0x83, _I, "rain/piezo/daily"),
    (0x84, _I, "rain/piezo/weekly"),
    (0x85, _I, "rain/piezo/monthly"),
    (0x86, _I, "rain/piezo/yearly"),
    (0x87, DecodeVariant.PIEZO_GAIN_20, "rain/piezo/gain"),
    (0x88, DecodeVariant.TIME_3, "rain/rst/time"),
]


def build_registry(entries: Iterable[tuple[int, DecodeVariant, str]]) -> dict[int, TagDescriptor]:
    """
    Index ``(tag, variant, channel)`` entries by tag id.

    Raises:
        ValueError: A tag id is out of range or appears twice.
    """
    registry: dict[int, TagDescriptor] = {}
    for tag, variant, channel in entries:
        if not 0 <= tag <= 0xFF:
            raise ValueError(f"tag id 0x{tag:X} does not fit in one byte")
        if tag in registry:
            raise ValueError(f"duplicate tag id 0x{tag:02X} ({registry[tag].channel!r} and {channel!r})")
        registry[tag] = TagDescriptor(tag=tag, variant=variant, channel=channel)
    return registry


TAG_REGISTRY: dict[int, TagDescriptor] = build_registry(TAG_TABLE)


def lookup(tag: int, registry: dict[int, TagDescriptor] | None = None) -> Optional[TagDescriptor]:
    return (TAG_REGISTRY if registry is None else registry).get(tag)

