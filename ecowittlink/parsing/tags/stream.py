from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ecowittlink.parsing.tags.decode import Reading, decode_tag
from ecowittlink.parsing.tags.registry import TagDescriptor, TAG_REGISTRY


class TagStreamError(Exception):
    """A condition that stops the payload walk. Returned in results, not raised by the parser."""

    def __init__(self, tag: int, offset: int, message: str) -> None:
        super().__init__(message)
        self.tag = tag
        self.offset = offset


class UnknownTagError(TagStreamError):
    def __init__(self, tag: int, offset: int) -> None:
        super().__init__(tag, offset, f"unknown tag 0x{tag:02X} at offset {offset}")


class UnsupportedTagError(TagStreamError):
    def __init__(self, descriptor: TagDescriptor, offset: int) -> None:
        super().__init__(
            descriptor.tag,
            offset,
            f"tag 0x{descriptor.tag:02X} ({descriptor.variant.label}) at offset {offset} cannot be decoded",
        )
        self.descriptor = descriptor


class TruncatedTagError(TagStreamError):
    def __init__(self, descriptor: TagDescriptor, offset: int, available: int) -> None:
        super().__init__(
            descriptor.tag,
            offset,
            f"tag 0x{descriptor.tag:02X} needs {descriptor.width} bytes at offset {offset}, {available} left",
        )
        self.descriptor = descriptor


@dataclass
class TagStreamResult:
    readings: list[Reading] = field(default_factory=list)
    skipped: list[TagDescriptor] = field(default_factory=list)
    consumed: int = 0
    error: Optional[TagStreamError] = None

    @property
    def complete(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict[str, str]:
        return {reading.channel: reading.value for reading in self.readings}


def parse_payload(payload: bytes, registry: dict[int, TagDescriptor] | None = None) -> TagStreamResult:
    """
    Walk a live data payload tag by tag.

    The walk stops at the first tag whose width is unknown (unregistered,
    variable length, or running past the end of the payload); everything
    decoded before that point is kept in the result.
    """
    registry = TAG_REGISTRY if registry is None else registry
    result = TagStreamResult()
    cursor = 0
    while cursor < len(payload):
        tag = payload[cursor]
        descriptor = registry.get(tag)
        if descriptor is None:
            result.error = UnknownTagError(tag, cursor)
            break
        if descriptor.width is None:
            result.error = UnsupportedTagError(descriptor, cursor)
            break
        data = payload[cursor + 1: cursor + 1 + descriptor.width]
        if len(data) < descriptor.width:
            result.error = TruncatedTagError(descriptor, cursor, len(data))
            break

        readings = decode_tag(descriptor, data)
        if readings:
            result.readings.extend(readings)
        else:
            result.skipped.append(descriptor)
        cursor += 1 + descriptor.width

    result.consumed = cursor
    return result


def publish_payload(payload: bytes, cache, now: float | None = None, registry: dict[int, TagDescriptor] | None = None) -> TagStreamResult:
    """Parse ``payload`` and record every reading in ``cache``, including those before a stop condition."""
    result = parse_payload(payload, registry=registry)
    for reading in result.readings:
        cache.record(reading.channel, reading.value, now)
    return result
