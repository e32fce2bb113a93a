import pytest

from sctpcore.params import (
    HmacAlgorithm,
    ParamError,
    ParamHeader,
    ParamReconfigResponse,
    ParamRequestedHmacAlgorithm,
    ParamStateCookie,
    ParamSupportedExtensions,
    ReconfigResult,
    describe_hmac_algorithm,
    describe_reconfig_result,
)
from sctpcore.paramtype import ParamType

PARAM_HEADER = bytes([0x0, 0x1, 0x0, 0x4])
RECONFIG_RESPONSE = bytes(
    [0x0, 0x10, 0x0, 0xC, 0x0, 0x0, 0x0, 0x1, 0x0, 0x0, 0x0, 0x1]
)


def test_param_header_success():
    parsed = ParamHeader.unmarshal(PARAM_HEADER)
    assert parsed == ParamHeader(typ=ParamType.HEARTBEAT_INFO, raw=b"", length=4)
    assert parsed.marshal() == PARAM_HEADER


def test_param_header_value_trimmed_to_reported_length():
    parsed = ParamHeader.unmarshal(bytes([0x0, 0x7, 0x0, 0x6, 0xAA, 0xBB, 0xCC]))
    assert parsed.raw == b"\xaa\xbb"
    assert parsed.length == 6


@pytest.mark.parametrize(
    "binary",
    [
        PARAM_HEADER[:2],
        bytes([0x0, 0xD, 0x0, 0x3]),
        bytes([0x0, 0xD, 0x0, 0x10]),
    ],
    ids=["header too short", "reported length below header", "wrong reported length"],
)
def test_param_header_unmarshal_failure(binary):
    with pytest.raises(ParamError):
        ParamHeader.unmarshal(binary)


def test_param_header_str_empty():
    assert str(ParamHeader.unmarshal(PARAM_HEADER)) == "Heartbeat Info (4): "


def test_param_header_str_dump():
    text = str(ParamHeader(ParamType.STATE_COOKIE, b"AB", 6))
    assert text.startswith("State Cookie (6): 00000000  41 42 ")
    assert text.endswith("|AB|\n")


def test_reconfig_response_success():
    parsed = ParamReconfigResponse.unmarshal(RECONFIG_RESPONSE)
    assert parsed == ParamReconfigResponse(
        sequence_number=1, result=ReconfigResult.SUCCESS_PERFORMED
    )
    assert parsed.marshal() == RECONFIG_RESPONSE


@pytest.mark.parametrize(
    "binary",
    [
        RECONFIG_RESPONSE[:8],
        bytes([0x0, 0x10, 0x0, 0x4]),
    ],
    ids=["packet too short", "param too short"],
)
def test_reconfig_response_failure(binary):
    with pytest.raises(ParamError):
        ParamReconfigResponse.unmarshal(binary)


@pytest.mark.parametrize(
    "result, expected",
    [
        (ReconfigResult.SUCCESS_NOP, "0: Success - Nothing to do"),
        (ReconfigResult.SUCCESS_PERFORMED, "1: Success - Performed"),
        (ReconfigResult.DENIED, "2: Denied"),
        (ReconfigResult.ERROR_WRONG_SSN, "3: Error - Wrong SSN"),
        (
            ReconfigResult.ERROR_REQUEST_ALREADY_IN_PROGRESS,
            "4: Error - Request already in progress",
        ),
        (ReconfigResult.ERROR_BAD_SEQUENCE_NUMBER, "5: Error - Bad Sequence Number"),
        (ReconfigResult.IN_PROGRESS, "6: In progress"),
    ],
)
def test_reconfig_result_stringer(result, expected):
    assert str(result) == expected


def test_reconfig_result_unknown():
    assert describe_reconfig_result(7) == "Unknown reconfigResult: 7"


def test_reconfig_response_unknown_result_kept():
    binary = bytes([0x0, 0x10, 0x0, 0xC, 0, 0, 0, 9, 0, 0, 0, 42])
    parsed = ParamReconfigResponse.unmarshal(binary)
    assert parsed.sequence_number == 9
    assert parsed.result == 42
    assert parsed.marshal() == binary


def test_requested_hmac_round_trip():
    param = ParamRequestedHmacAlgorithm(
        [HmacAlgorithm.SHA128, HmacAlgorithm.SHA256]
    )
    binary = param.marshal()
    assert binary == bytes([0x80, 0x04, 0x00, 0x08, 0x00, 0x01, 0x00, 0x03])
    assert ParamRequestedHmacAlgorithm.unmarshal(binary) == param


def test_requested_hmac_invalid_algorithm():
    with pytest.raises(ParamError, match="invalid algorithm type"):
        ParamRequestedHmacAlgorithm.unmarshal(bytes([0x80, 0x04, 0x00, 0x06, 0x00, 0x00]))


@pytest.mark.parametrize(
    "value, expected",
    [
        (HmacAlgorithm.RESV1, "HMAC Reserved (0x00)"),
        (HmacAlgorithm.SHA128, "HMAC SHA-128"),
        (HmacAlgorithm.RESV2, "HMAC Reserved (0x02)"),
        (HmacAlgorithm.SHA256, "HMAC SHA-256"),
        (9, "Unknown HMAC Algorithm type: 9"),
    ],
)
def test_describe_hmac_algorithm(value, expected):
    assert describe_hmac_algorithm(value) == expected


def test_state_cookie_round_trip():
    param = ParamStateCookie(b"abc")
    binary = param.marshal()
    assert binary == b"\x00\x07\x00\x07abc"
    assert ParamStateCookie.unmarshal(binary).cookie == b"abc"


def test_state_cookie_random():
    first = ParamStateCookie.random()
    second = ParamStateCookie.random()
    assert len(first.cookie) == 32
    assert len(second.cookie) == 32
    assert first.cookie != second.cookie


def test_state_cookie_str():
    text = str(ParamStateCookie(b"abc"))
    assert text.startswith("State Cookie (7): 00000000  61 62 63 ")
    assert text.endswith("|abc|\n: abc")


def test_supported_extensions_round_trip():
    param = ParamSupportedExtensions([0x82, 0xC1])
    binary = param.marshal()
    assert binary == bytes([0x80, 0x08, 0x00, 0x06, 0x82, 0xC1])
    assert ParamSupportedExtensions.unmarshal(binary).chunk_types == [0x82, 0xC1]


def test_supported_extensions_invalid_chunk_type():
    with pytest.raises(ParamError):
        ParamSupportedExtensions([256]).marshal()