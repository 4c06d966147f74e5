"""
Tag registry, value decoders and payload walker for the live data reply.

Items in the payload are a one byte tag followed by a value whose width and
interpretation depend on the tag's decode variant.
"""
from ecowittlink.parsing.tags.decode import (
    battery_channel,
    decode_tag,
    decode_value,
    render_bitmask,
    Reading,
)
from ecowittlink.parsing.tags.registry import (
    build_registry,
    lookup,
    DecodeVariant,
    TagDescriptor,
    TAG_REGISTRY,
    TAG_TABLE,
)
from ecowittlink.parsing.tags.stream import (
    parse_payload,
    publish_payload,
    TagStreamError,
    TagStreamResult,
    TruncatedTagError,
    UnknownTagError,
    UnsupportedTagError,
)

__all__ = [
    "battery_channel",
    "build_registry",
    "decode_tag",
    "decode_value",
    "lookup",
    "parse_payload",
    "publish_payload",
    "render_bitmask",
    "DecodeVariant",
    "Reading",
    "TagDescriptor",
    "TagStreamError",
    "TagStreamResult",
    "TruncatedTagError",
    "UnknownTagError",
    "UnsupportedTagError",
    "TAG_REGISTRY",
    "TAG_TABLE",
]
