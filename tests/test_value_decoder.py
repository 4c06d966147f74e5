"""Tests for per-variant value decoding."""
import pytest

from ecowittlink.parsing.tags import (
    battery_channel,
    decode_tag,
    decode_value,
    render_bitmask,
    DecodeVariant,
    Reading,
    TagDescriptor,
)


@pytest.mark.parametrize(
    "variant, data, expected",
    [
        (DecodeVariant.BYTE_RAW, b"\x2d", "45"),
        (DecodeVariant.SHORT_RAW, b"\x01\x0e", "270"),
        (DecodeVariant.TRIPLE_RAW, b"\x01\x00\x00", "65536"),
        (DecodeVariant.INT_RAW, b"\x00\x01\x86\xa0", "100000"),
        (DecodeVariant.INT_RAW, b"\xff\xff\xff\xff", "4294967295"),
        (DecodeVariant.SHORT_SCALED_UNSIGNED, b"\x27\x9c", "1014.0"),
        (DecodeVariant.SHORT_SCALED_UNSIGNED, b"\xff\xf6", "6552.6"),
    ],
)
def test_raw_and_unsigned_variants(variant, data, expected):
    assert decode_value(variant, data) == expected


def test_signed_positive():
    assert decode_value(DecodeVariant.SHORT_SCALED_SIGNED, b"\x00\x0a") == "1.0"


def test_signed_negative_offset_rule():
    # 0xFFF6 - 0xFFFF = -9
    assert decode_value(DecodeVariant.SHORT_SCALED_SIGNED, b"\xff\xf6") == "-0.9"


def test_signed_all_ones_is_zero():
    assert decode_value(DecodeVariant.SHORT_SCALED_SIGNED, b"\xff\xff") == "0.0"


def test_signed_typical_temperature():
    # 0x00D2 = 210 -> 21.0
    assert decode_value(DecodeVariant.SHORT_SCALED_SIGNED, b"\x00\xd2") == "21.0"


def test_bitmask_all_zero():
    rendered = decode_value(DecodeVariant.BITMASK_16, bytes(16))
    assert rendered == "0" * 128


def test_bitmask_bit_order():
    data = bytearray(16)
    data[0] = 0x01
    rendered = render_bitmask(bytes(data))
    assert len(rendered) == 128
    assert rendered[7] == "1"
    assert rendered.count("1") == 1


def test_bitmask_msb_first():
    data = bytearray(16)
    data[0] = 0x80
    data[15] = 0x01
    rendered = render_bitmask(bytes(data))
    assert rendered[0] == "1"
    assert rendered[-1] == "1"
    assert rendered.count("1") == 2


@pytest.mark.parametrize(
    "variant",
    [DecodeVariant.TIME_3, DecodeVariant.TIME_6, DecodeVariant.CO2_COMPOSITE, DecodeVariant.PIEZO_GAIN_20],
)
def test_reserved_variants_produce_no_value(variant):
    assert decode_value(variant, bytes(variant.width)) is None


def test_variable_width_variant_rejected():
    with pytest.raises(ValueError):
        decode_value(DecodeVariant.PM25_AQI_VARIABLE, b"\x02\x00\x10")


def test_short_data_rejected():
    with pytest.raises(ValueError):
        decode_value(DecodeVariant.INT_RAW, b"\x00\x01")


def test_battery_channel():
    assert battery_channel("temperature/t3") == "battery/t3"
    assert battery_channel("pool") == "battery/pool"


def test_decode_temp_and_battery():
    descriptor = TagDescriptor(0x63, DecodeVariant.TEMP_AND_BATTERY, "temperature/t1")
    readings = decode_tag(descriptor, b"\x00\xfa\x4b")
    assert readings == [
        Reading("battery/t1", "1.50"),
        Reading("temperature/t1", "25.0"),
    ]


def test_decode_temp_and_battery_negative():
    descriptor = TagDescriptor(0x64, DecodeVariant.TEMP_AND_BATTERY, "temperature/t2")
    readings = decode_tag(descriptor, b"\xff\xce\x00")
    assert readings[0] == Reading("battery/t2", "0.00")
    assert readings[1] == Reading("temperature/t2", "-4.9")


def test_decode_tag_reserved_is_empty():
    descriptor = TagDescriptor(0x18, DecodeVariant.TIME_6, "date_and_time")
    assert decode_tag(descriptor, bytes(6)) == []


def test_decode_tag_single_reading():
    descriptor = TagDescriptor(0x06, DecodeVariant.BYTE_RAW, "humidity/indoors")
    assert decode_tag(descriptor, b"\x2d") == [Reading("humidity/indoors", "45")]


def test_variant_widths():
    assert DecodeVariant.BITMASK_16.width == 16
    assert DecodeVariant.PIEZO_GAIN_20.width == 20
    assert DecodeVariant.PM25_AQI_VARIABLE.width is None
    assert not DecodeVariant.PM25_AQI_VARIABLE.is_fixed_width
