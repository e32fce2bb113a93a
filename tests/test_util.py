import pytest

from sctpcore.util import (
    get_padding,
    pad_byte,
    sna16_eq,
    sna16_gt,
    sna16_gte,
    sna16_lt,
    sna16_lte,
    sna32_eq,
    sna32_gt,
    sna32_gte,
    sna32_lt,
    sna32_lte,
)

DIV = 16


@pytest.mark.parametrize(
    "value, pad_len, expected",
    [
        (b"\x01\x02", 0, b"\x01\x02"),
        (b"\x01\x02", 1, b"\x01\x02\x00"),
        (b"\x01\x02", 2, b"\x01\x02\x00\x00"),
        (b"\x01\x02", 3, b"\x01\x02\x00\x00\x00"),
        (b"\x01\x02", -1, b"\x01\x02"),
    ],
)
def test_pad_byte(value, pad_len, expected):
    assert pad_byte(value, pad_len) == expected


@pytest.mark.parametrize(
    "length, expected", [(0, 0), (1, 3), (2, 2), (3, 1), (4, 0), (5, 3)]
)
def test_get_padding(length, expected):
    assert get_padding(length) == expected


@pytest.mark.parametrize("i", range(DIV))
def test_serial_number_arithmetic_32(i):
    mask = 0xFFFFFFFF
    interval = (1 << 32) // DIV
    max_forward = (1 << 31) - 1
    max_backward = 1 << 31

    s1 = i * interval
    s2f = (s1 + max_forward) & mask
    s2b = (s1 + max_backward) & mask

    assert sna32_lt(s1, s2f) is True
    assert sna32_lt(s1, s2b) is False
    assert sna32_gt(s1, s2f) is False
    assert sna32_gt(s1, s2b) is True
    assert sna32_lte(s1, s2f) is True
    assert sna32_lte(s1, s2b) is False
    assert sna32_gte(s1, s2f) is False
    assert sna32_gte(s1, s2b) is True

    assert sna32_eq(s1, s1) is True
    assert sna32_eq(s2b, s2b) is True
    assert sna32_eq(s1, (s1 + 1) & mask) is False
    assert sna32_eq(s1, (s1 - 1) & mask) is False

    assert sna32_lte(s1, s1) is True
    assert sna32_lte(s2b, s2b) is True
    assert sna32_gte(s1, s1) is True
    assert sna32_gte(s2b, s2b) is True


@pytest.mark.parametrize("i", range(DIV))
def test_serial_number_arithmetic_16(i):
    mask = 0xFFFF
    interval = (1 << 16) // DIV
    max_forward = (1 << 15) - 1
    max_backward = 1 << 15

    s1 = i * interval
    s2f = (s1 + max_forward) & mask
    s2b = (s1 + max_backward) & mask

    assert sna16_lt(s1, s2f) is True
    assert sna16_lt(s1, s2b) is False
    assert sna16_gt(s1, s2f) is False
    assert sna16_gt(s1, s2b) is True
    assert sna16_lte(s1, s2f) is True
    assert sna16_lte(s1, s2b) is False
    assert sna16_gte(s1, s2f) is False
    assert sna16_gte(s1, s2b) is True

    assert sna16_eq(s1, s1) is True
    assert sna16_eq(s2b, s2b) is True
    assert sna16_eq(s1, (s1 + 1) & mask) is False
    assert sna16_eq(s1, (s1 - 1) & mask) is False

    assert sna16_lte(s1, s1) is True
    assert sna16_lte(s2b, s2b) is True
    assert sna16_gte(s1, s1) is True
    assert sna16_gte(s2b, s2b) is True


def test_wraparound_ordering():
    assert sna32_lt(0xFFFFFFFF, 0) is True
    assert sna32_gt(0, 0xFFFFFFFF) is True
    assert sna16_lt(0xFFFF, 0) is True
    assert sna16_gt(0, 0xFFFF) is True