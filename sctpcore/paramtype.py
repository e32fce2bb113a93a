"""SCTP INIT/INIT-ACK parameter types."""

from __future__ import annotations

import enum
import struct


class ParamPacketTooShortError(ValueError):
    """Raised when there are too few bytes to hold a parameter type."""

    def __init__(self, message: str = "packet to short") -> None:
        super().__init__(message)


class ParamType(enum.IntEnum):
    """Known SCTP parameter types."""

    HEARTBEAT_INFO = 1
    IPV4_ADDR = 5
    IPV6_ADDR = 6
    STATE_COOKIE = 7
    UNRECOGNIZED_PARAM = 8
    COOKIE_PRESERVATIVE = 9
    HOST_NAME_ADDR = 11
    SUPPORTED_ADDR_TYPES = 12
    OUT_SSN_RESET_REQ = 13
    INC_SSN_RESET_REQ = 14
    SSN_TSN_RESET_REQ = 15
    RECONFIG_RESP = 16
    ADD_OUT_STREAMS_REQ = 17
    ADD_INC_STREAMS_REQ = 18
    RANDOM = 32770
    CHUNK_LIST = 32771
    REQ_HMAC_ALGO = 32772
    PADDING = 32773
    SUPPORTED_EXT = 32776
    FORWARD_TSN_SUPP = 49152
    ADD_IP_ADDR = 49153
    DEL_IP_ADDR = 49154
    ERR_CLAUSE_IND = 49155
    SET_PRI_ADDR = 49156
    SUCCESS_IND = 49157
    ADAPT_LAYER_IND = 49158

    def __str__(self) -> str:
        return describe_param_type(self)


_DESCRIPTIONS = {
    ParamType.HEARTBEAT_INFO: "Heartbeat Info",
    ParamType.IPV4_ADDR: "IPv4 IP",
    ParamType.IPV6_ADDR: "IPv6 IP",
    ParamType.STATE_COOKIE: "State Cookie",
    ParamType.UNRECOGNIZED_PARAM: "Unrecognized Parameters",
    ParamType.COOKIE_PRESERVATIVE: "Cookie Preservative",
    ParamType.HOST_NAME_ADDR: "Host Name IP",
    ParamType.SUPPORTED_ADDR_TYPES: "Supported IP Types",
    ParamType.OUT_SSN_RESET_REQ: "Outgoing SSN Reset Request Parameter",
    ParamType.INC_SSN_RESET_REQ: "Incoming SSN Reset Request Parameter",
    ParamType.SSN_TSN_RESET_REQ: "SSN/TSN Reset Request Parameter",
    ParamType.RECONFIG_RESP: "Re-configuration Response Parameter",
    ParamType.ADD_OUT_STREAMS_REQ: "Add Outgoing Streams Request Parameter",
    ParamType.ADD_INC_STREAMS_REQ: "Add Incoming Streams Request Parameter",
    ParamType.RANDOM: "Random",
    ParamType.CHUNK_LIST: "Chunk List",
    ParamType.REQ_HMAC_ALGO: "Requested HMAC Algorithm Parameter",
    ParamType.PADDING: "Padding",
    ParamType.SUPPORTED_EXT: "Supported Extensions",
    ParamType.FORWARD_TSN_SUPP: "Forward TSN supported",
    ParamType.ADD_IP_ADDR: "Add IP IP",
    ParamType.DEL_IP_ADDR: "Delete IP IP",
    ParamType.ERR_CLAUSE_IND: "Error Cause Indication",
    ParamType.SET_PRI_ADDR: "Set Primary IP",
    ParamType.SUCCESS_IND: "Success Indication",
    ParamType.ADAPT_LAYER_IND: "Adaptation Layer Indication",
}


def describe_param_type(value: int) -> str:
    """Return a readable name for a parameter type value, known or not."""
    try:
        return _DESCRIPTIONS[ParamType(int(value))]
    except ValueError:
        return f"Unknown ParamType: {int(value)}"


def parse_param_type(raw: bytes) -> ParamType | int:
    """Read a big-endian parameter type from the first two bytes of ``raw``.

    Known values come back as ``ParamType``; others as a plain ``int``.
    """
    if len(raw) < 2:
        raise ParamPacketTooShortError()
    (value,) = struct.unpack_from(">H", raw)
    try:
        return ParamType(value)
    except ValueError:
        return value