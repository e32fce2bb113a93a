"""Reassembly of fragmented user messages received on one stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key

from .payload_queue import PayloadData
from .util import sna16_gt, sna16_lt, sna16_lte, sna32_gt, sna32_lt

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF


class TryAgainError(Exception):
    """Raised when no complete message is ready to be read."""

    def __init__(self, message: str = "try again") -> None:
        super().__init__(message)


class ShortBufferError(Exception):
    """Raised when a message is larger than the requested read size.

    The message is consumed; ``data`` holds the part that fitted.
    """

    def __init__(self, data: bytes, ppi: int) -> None:
        super().__init__("short buffer")
        self.data = data
        self.ppi = ppi


def _cmp(lt):
    def compare(a: int, b: int) -> int:
        if lt(a, b):
            return -1
        if lt(b, a):
            return 1
        return 0

    return cmp_to_key(compare)


_TSN_KEY = _cmp(sna32_lt)
_SSN_KEY = _cmp(sna16_lt)


def _sort_by_tsn(chunks: list[PayloadData]) -> None:
    chunks.sort(key=lambda c: _TSN_KEY(c.tsn))


@dataclass
class ChunkSet:
    """Chunks sharing one SSN, kept in TSN order."""

    ssn: int = 0
    ppi: int = 0
    chunks: list[PayloadData] = field(default_factory=list)

    def push(self, chunk: PayloadData) -> bool:
        """Add ``chunk`` unless its TSN is a duplicate; return completeness."""
        if any(c.tsn == chunk.tsn for c in self.chunks):
            return False
        self.chunks.append(chunk)
        _sort_by_tsn(self.chunks)
        return self.is_complete()

    def is_complete(self) -> bool:
        """True when the chunks begin and end a message with contiguous TSNs."""
        if not self.chunks:
            return False
        if not self.chunks[0].beginning_fragment:
            return False
        if not self.chunks[-1].ending_fragment:
            return False
        return all(
            cur.tsn == (prev.tsn + 1) & _MASK32
            for prev, cur in zip(self.chunks, self.chunks[1:])
        )


class ReassemblyQueue:
    """Collects DATA chunks of stream ``si`` into complete user messages."""

    def __init__(self, si: int) -> None:
        self.si = si
        self.next_ssn = 0
        self.ordered: list[ChunkSet] = []
        self.unordered: list[ChunkSet] = []
        self.unordered_chunks: list[PayloadData] = []
        self._n_bytes = 0

    def push(self, chunk: PayloadData) -> bool:
        """Queue ``chunk``; return True if it completed a message."""
        if chunk.stream_identifier != self.si:
            return False

        if chunk.unordered:
            self.unordered_chunks.append(chunk)
            self._n_bytes += len(chunk.user_data)
            _sort_by_tsn(self.unordered_chunks)
            cset = self._find_complete_unordered_chunk_set()
            if cset is not None:
                self.unordered.append(cset)
                return True
            return False

        if sna16_lt(chunk.stream_sequence_number, self.next_ssn):
            return False

        cset = next(
            (s for s in self.ordered if s.ssn == chunk.stream_sequence_number),
            None,
        )
        if cset is None:
            cset = ChunkSet(chunk.stream_sequence_number, chunk.payload_type)
            self.ordered.append(cset)
            self.ordered.sort(key=lambda s: _SSN_KEY(s.ssn))

        self._n_bytes += len(chunk.user_data)
        return cset.push(chunk)

    def _find_complete_unordered_chunk_set(self) -> ChunkSet | None:
        start = -1
        count = 0
        last_tsn = 0
        found = False

        for i, c in enumerate(self.unordered_chunks):
            if c.beginning_fragment:
                start = i
                count = 1
                last_tsn = c.tsn
                if c.ending_fragment:
                    found = True
                    break
                continue
            if start < 0:
                continue
            if c.tsn != (last_tsn + 1) & _MASK32:
                start = -1
                continue
            last_tsn = c.tsn
            count += 1
            if c.ending_fragment:
                found = True
                break

        if not found:
            return None

        chunks = self.unordered_chunks[start : start + count]
        del self.unordered_chunks[start : start + count]
        return ChunkSet(0, chunks[0].payload_type, chunks)

    def is_readable(self) -> bool:
        """True when a complete message can be read now."""
        if self.unordered:
            return True
        if self.ordered:
            cset = self.ordered[0]
            if cset.is_complete() and sna16_lte(cset.ssn, self.next_ssn):
                return True
        return False

    def read(self, size: int) -> tuple[bytes, int]:
        """Remove the next complete message; return its data and PPI.

        Raises ``TryAgainError`` if none is ready, and ``ShortBufferError``
        if the message is longer than ``size``.
        """
        if self.unordered:
            cset = self.unordered.pop(0)
        elif self.ordered:
            cset = self.ordered[0]
            if not cset.is_complete() or sna16_gt(cset.ssn, self.next_ssn):
                raise TryAgainError()
            self.ordered.pop(0)
            if cset.ssn == self.next_ssn:
                self.next_ssn = (self.next_ssn + 1) & _MASK16
        else:
            raise TryAgainError()

        data = b"".join(c.user_data for c in cset.chunks)
        self._subtract_num_bytes(len(data))
        if len(data) > size:
            raise ShortBufferError(data[: max(size, 0)], cset.ppi)
        return data, cset.ppi

    def forward_tsn_for_ordered(self, last_ssn: int) -> None:
        """Drop incomplete ordered sets up to ``last_ssn`` and move past it."""
        keep = []
        for cset in self.ordered:
            if sna16_lte(cset.ssn, last_ssn) and not cset.is_complete():
                for c in cset.chunks:
                    self._subtract_num_bytes(len(c.user_data))
                continue
            keep.append(cset)
        self.ordered = keep

        if sna16_lte(self.next_ssn, last_ssn):
            self.next_ssn = (last_ssn + 1) & _MASK16

    def forward_tsn_for_unordered(self, new_cumulative_tsn: int) -> None:
        """Drop pending unordered fragments not newer than the given TSN."""
        cut = 0
        for c in self.unordered_chunks:
            if sna32_gt(c.tsn, new_cumulative_tsn):
                break
            cut += 1
        for c in self.unordered_chunks[:cut]:
            self._subtract_num_bytes(len(c.user_data))
        del self.unordered_chunks[:cut]

    def _subtract_num_bytes(self, n_bytes: int) -> None:
        self._n_bytes = max(self._n_bytes - n_bytes, 0)

    def num_bytes(self) -> int:
        """Total user data bytes held."""
        return self._n_bytes