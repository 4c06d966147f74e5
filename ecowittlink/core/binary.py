from __future__ import annotations

from typing import Iterable


def checksum8(data: Iterable[int] | bytes) -> int:
    return sum(data) % 256


def read_uint_be(data: bytes, offset: int = 0, width: int = 2) -> int:
    if offset < 0 or offset + width > len(data):
        raise ValueError(f"cannot read {width} bytes at offset {offset} from {len(data)}-byte buffer")
    return int.from_bytes(data[offset: offset + width], byteorder="big", signed=False)


def get_bit(byte_value: int, bit_index: int) -> bool:
    if bit_index < 0 or bit_index > 7:
        raise ValueError("bit_index must be between 0 and 7")
    return bool(byte_value & (1 << bit_index))


def hexdump(data: bytes, width: int = 16) -> list[str]:
    return [data[i: i + width].hex(" ").upper() for i in range(0, len(data), width)]
