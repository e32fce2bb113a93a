"""Queue of DATA chunk payloads keyed by TSN."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key

from .util import sna32_lt, sna32_lte

_MASK16 = 0xFFFF


@dataclass(eq=False)
class PayloadData:
    """A DATA chunk payload together with its transmission state.

    Instances compare by identity, so the same chunk can be tracked in
    several queues.
    """

    tsn: int = 0
    user_data: bytes = b""
    stream_identifier: int = 0
    stream_sequence_number: int = 0
    payload_type: int = 0
    unordered: bool = False
    beginning_fragment: bool = False
    ending_fragment: bool = False
    immediate_sack: bool = False
    head: PayloadData | None = field(default=None, repr=False)
    acked: bool = False
    retransmit: bool = False
    abandoned: bool = False


@dataclass(frozen=True)
class GapAckBlock:
    """A run of received TSNs, as offsets from the cumulative TSN."""

    start: int
    end: int


def _tsn_order(a: int, b: int) -> int:
    if sna32_lt(a, b):
        return -1
    if sna32_lt(b, a):
        return 1
    return 0


_TSN_KEY = cmp_to_key(_tsn_order)


class PayloadQueue:
    """Payloads indexed by TSN, iterated in serial-number order."""

    def __init__(self) -> None:
        self._chunks: dict[int, PayloadData] = {}
        self._sorted: list[int] | None = None
        self._dup_tsn: list[int] = []
        self._n_bytes = 0

    def _sorted_keys(self) -> list[int]:
        if self._sorted is None:
            self._sorted = sorted(self._chunks, key=_TSN_KEY)
        return self._sorted

    def can_push(self, chunk: PayloadData, cumulative_tsn: int) -> bool:
        """Whether ``chunk`` is new and newer than ``cumulative_tsn``."""
        return not (
            chunk.tsn in self._chunks or sna32_lte(chunk.tsn, cumulative_tsn)
        )

    def push_no_check(self, chunk: PayloadData) -> None:
        """Add ``chunk`` without any duplicate check."""
        self._chunks[chunk.tsn] = chunk
        self._n_bytes += len(chunk.user_data)
        self._sorted = None

    def push(self, chunk: PayloadData, cumulative_tsn: int) -> bool:
        """Add ``chunk``; record its TSN as a duplicate and return False if it
        is already queued or not newer than ``cumulative_tsn``."""
        if not self.can_push(chunk, cumulative_tsn):
            self._dup_tsn.append(chunk.tsn)
            return False
        self.push_no_check(chunk)
        return True

    def pop(self, tsn: int) -> PayloadData | None:
        """Remove and return the oldest chunk if its TSN equals ``tsn``."""
        keys = self._sorted_keys()
        if self._chunks and keys[0] == tsn:
            self._sorted = keys[1:]
            chunk = self._chunks.pop(tsn, None)
            if chunk is not None:
                self._n_bytes -= len(chunk.user_data)
                return chunk
        return None

    def get(self, tsn: int) -> PayloadData | None:
        """Return the chunk with ``tsn``, or None."""
        return self._chunks.get(tsn)

    def pop_duplicates(self) -> list[int]:
        """Return and clear the TSNs recorded as duplicates."""
        dups, self._dup_tsn = self._dup_tsn, []
        return dups

    def gap_ack_blocks(self, cumulative_tsn: int) -> list[GapAckBlock]:
        """Describe the queued TSNs as gap ack blocks relative to
        ``cumulative_tsn``."""
        if not self._chunks:
            return []
        blocks: list[GapAckBlock] = []
        start = end = None
        for tsn in self._sorted_keys():
            diff = (tsn - cumulative_tsn) & _MASK16
            if start is None:
                start = end = diff
            elif (end + 1) & _MASK16 == diff:
                end = diff
            else:
                blocks.append(GapAckBlock(start, end))
                start = end = diff
        blocks.append(GapAckBlock(start, end))
        return blocks

    def gap_ack_blocks_string(self, cumulative_tsn: int) -> str:
        """Render the gap ack blocks as ``cumTSN=N,s-e,...``."""
        parts = [f"cumTSN={cumulative_tsn}"]
        parts.extend(
            f"{b.start}-{b.end}" for b in self.gap_ack_blocks(cumulative_tsn)
        )
        return ",".join(parts)

    def mark_as_acked(self, tsn: int) -> int:
        """Mark the chunk acknowledged, drop its data, return bytes freed."""
        chunk = self._chunks.get(tsn)
        if chunk is None:
            return 0
        chunk.acked = True
        chunk.retransmit = False
        n_bytes = len(chunk.user_data)
        self._n_bytes -= n_bytes
        chunk.user_data = b""
        return n_bytes

    def last_tsn_received(self) -> int | None:
        """Return the newest queued TSN, or None if the queue is empty."""
        keys = self._sorted_keys()
        return keys[-1] if keys else None

    def mark_all_to_retransmit(self) -> None:
        """Flag every chunk that is neither acked nor abandoned."""
        for chunk in self._chunks.values():
            if chunk.acked or chunk.abandoned:
                continue
            chunk.retransmit = True

    def num_bytes(self) -> int:
        """Total user data bytes held."""
        return self._n_bytes

    def __len__(self) -> int:
        return len(self._chunks)