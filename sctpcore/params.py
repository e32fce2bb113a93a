"""SCTP parameter header and the parameter kinds built on it."""

from __future__ import annotations

import enum
import secrets
import struct
from dataclasses import dataclass, field

from .paramtype import ParamPacketTooShortError, ParamType, parse_param_type

PARAM_HEADER_LENGTH = 4
_STATE_COOKIE_LENGTH = 32


class ParamError(ValueError):
    """Raised when a parameter cannot be parsed or encoded."""


def _hex_dump(data: bytes) -> str:
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset : offset + 16]
        hex_part = ""
        for i, b in enumerate(chunk):
            hex_part += f"{b:02x} "
            if i in (7, 15):
                hex_part += " "
        chars = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        lines.append(f"{offset:08x}  {hex_part.ljust(50)}|{chars}|\n")
    return "".join(lines)


@dataclass
class ParamHeader:
    """A type-length-value parameter; ``raw`` holds the value bytes."""

    typ: int
    raw: bytes = b""
    length: int = 0

    def marshal(self) -> bytes:
        total = PARAM_HEADER_LENGTH + len(self.raw)
        if total > 0xFFFF:
            raise ParamError(f"param length ({total}) exceeds 65535")
        return struct.pack(">HH", int(self.typ), total) + bytes(self.raw)

    @classmethod
    def unmarshal(cls, raw: bytes) -> ParamHeader:
        raw = bytes(raw)
        if len(raw) < PARAM_HEADER_LENGTH:
            raise ParamError("param header too short")
        (reported,) = struct.unpack_from(">H", raw, 2)
        if reported < PARAM_HEADER_LENGTH:
            raise ParamError(
                "param self reported length is shorter than header length: "
                f"param self reported length ({reported}) shorter than "
                f"header length ({PARAM_HEADER_LENGTH})"
            )
        if len(raw) < reported:
            raise ParamError(
                "param self reported length is longer than header length: "
                f"param length ({len(raw)}) shorter than its self reported "
                f"length ({reported})"
            )
        try:
            typ = parse_param_type(raw)
        except ParamPacketTooShortError as exc:
            raise ParamError(f"failed to parse param type: {exc}") from exc
        return cls(typ=typ, raw=raw[PARAM_HEADER_LENGTH:reported], length=reported)

    def __str__(self) -> str:
        from .paramtype import describe_param_type

        return f"{describe_param_type(self.typ)} ({self.length}): {_hex_dump(self.raw)}"


class ReconfigResult(enum.IntEnum):
    """Result codes of a re-configuration response."""

    SUCCESS_NOP = 0
    SUCCESS_PERFORMED = 1
    DENIED = 2
    ERROR_WRONG_SSN = 3
    ERROR_REQUEST_ALREADY_IN_PROGRESS = 4
    ERROR_BAD_SEQUENCE_NUMBER = 5
    IN_PROGRESS = 6

    def __str__(self) -> str:
        return describe_reconfig_result(self)


_RECONFIG_RESULT_TEXT = {
    ReconfigResult.SUCCESS_NOP: "0: Success - Nothing to do",
    ReconfigResult.SUCCESS_PERFORMED: "1: Success - Performed",
    ReconfigResult.DENIED: "2: Denied",
    ReconfigResult.ERROR_WRONG_SSN: "3: Error - Wrong SSN",
    ReconfigResult.ERROR_REQUEST_ALREADY_IN_PROGRESS: "4: Error - Request already in progress",
    ReconfigResult.ERROR_BAD_SEQUENCE_NUMBER: "5: Error - Bad Sequence Number",
    ReconfigResult.IN_PROGRESS: "6: In progress",
}


def describe_reconfig_result(value: int) -> str:
    """Return a readable description of a re-configuration result code."""
    try:
        return _RECONFIG_RESULT_TEXT[ReconfigResult(int(value))]
    except ValueError:
        return f"Unknown reconfigResult: {int(value)}"


@dataclass
class ParamReconfigResponse:
    """Re-configuration Response parameter (type 16)."""

    sequence_number: int = 0
    result: ReconfigResult | int = ReconfigResult.SUCCESS_NOP

    def marshal(self) -> bytes:
        raw = struct.pack(">II", self.sequence_number, int(self.result))
        return ParamHeader(ParamType.RECONFIG_RESP, raw).marshal()

    @classmethod
    def unmarshal(cls, raw: bytes) -> ParamReconfigResponse:
        header = ParamHeader.unmarshal(raw)
        if len(header.raw) < 8:
            raise ParamError("reconfig response parameter too short")
        sequence_number, result = struct.unpack_from(">II", header.raw)
        try:
            result = ReconfigResult(result)
        except ValueError:
            pass
        return cls(sequence_number=sequence_number, result=result)


class HmacAlgorithm(enum.IntEnum):
    """HMAC algorithm identifiers."""

    RESV1 = 0
    SHA128 = 1
    RESV2 = 2
    SHA256 = 3

    def __str__(self) -> str:
        return describe_hmac_algorithm(self)


_HMAC_TEXT = {
    HmacAlgorithm.RESV1: "HMAC Reserved (0x00)",
    HmacAlgorithm.SHA128: "HMAC SHA-128",
    HmacAlgorithm.RESV2: "HMAC Reserved (0x02)",
    HmacAlgorithm.SHA256: "HMAC SHA-256",
}


def describe_hmac_algorithm(value: int) -> str:
    """Return a readable description of an HMAC algorithm identifier."""
    try:
        return _HMAC_TEXT[HmacAlgorithm(int(value))]
    except ValueError:
        return f"Unknown HMAC Algorithm type: {int(value)}"


@dataclass
class ParamRequestedHmacAlgorithm:
    """Requested HMAC Algorithm parameter."""

    available_algorithms: list[HmacAlgorithm | int] = field(default_factory=list)

    def marshal(self) -> bytes:
        raw = b"".join(struct.pack(">H", int(a)) for a in self.available_algorithms)
        return ParamHeader(ParamType.REQ_HMAC_ALGO, raw).marshal()

    @classmethod
    def unmarshal(cls, raw: bytes) -> ParamRequestedHmacAlgorithm:
        header = ParamHeader.unmarshal(raw)
        if len(header.raw) % 2:
            raise ParamError("requested HMAC algorithm parameter has odd length")
        algorithms: list[HmacAlgorithm | int] = []
        for (value,) in struct.iter_unpack(">H", header.raw):
            if value not in (HmacAlgorithm.SHA128, HmacAlgorithm.SHA256):
                raise ParamError(
                    f"invalid algorithm type: {describe_hmac_algorithm(value)}"
                )
            algorithms.append(HmacAlgorithm(value))
        return cls(available_algorithms=algorithms)


@dataclass
class ParamStateCookie:
    """State Cookie parameter."""

    cookie: bytes = b""

    @classmethod
    def random(cls) -> ParamStateCookie:
        """Create a cookie of 32 cryptographically random bytes."""
        return cls(cookie=secrets.token_bytes(_STATE_COOKIE_LENGTH))

    def marshal(self) -> bytes:
        return ParamHeader(ParamType.STATE_COOKIE, bytes(self.cookie)).marshal()

    @classmethod
    def unmarshal(cls, raw: bytes) -> ParamStateCookie:
        return cls(cookie=ParamHeader.unmarshal(raw).raw)

    def __str__(self) -> str:
        header = ParamHeader(
            ParamType.STATE_COOKIE,
            bytes(self.cookie),
            PARAM_HEADER_LENGTH + len(self.cookie),
        )
        return f"{header}: {bytes(self.cookie).decode('utf-8', errors='replace')}"


@dataclass
class ParamSupportedExtensions:
    """Supported Extensions parameter: a list of chunk type bytes."""

    chunk_types: list[int] = field(default_factory=list)

    def marshal(self) -> bytes:
        try:
            raw = bytes(int(c) for c in self.chunk_types)
        except ValueError as exc:
            raise ParamError(f"invalid chunk type: {exc}") from exc
        return ParamHeader(ParamType.SUPPORTED_EXT, raw).marshal()

    @classmethod
    def unmarshal(cls, raw: bytes) -> ParamSupportedExtensions:
        return cls(chunk_types=list(ParamHeader.unmarshal(raw).raw))