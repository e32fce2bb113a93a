"""Outbound chunks waiting to be sent, with fragment-aware selection."""

from __future__ import annotations

from collections import deque

from .payload_queue import PayloadData


class PendingQueueError(RuntimeError):
    """Raised when a chunk is popped out of the expected order."""


class PendingBaseQueue:
    """A simple FIFO of payload chunks."""

    def __init__(self) -> None:
        self._queue: deque[PayloadData] = deque()

    def push(self, chunk: PayloadData) -> None:
        self._queue.append(chunk)

    def pop(self) -> PayloadData | None:
        """Remove and return the first chunk, or None if empty."""
        return self._queue.popleft() if self._queue else None

    def get(self, index: int) -> PayloadData | None:
        """Return the chunk at ``index``, or None if out of range."""
        if 0 <= index < len(self._queue):
            return self._queue[index]
        return None

    def __len__(self) -> int:
        return len(self._queue)


class PendingQueue:
    """Unordered and ordered chunks; unordered go first, and once a
    fragmented message starts, its queue stays selected until it ends."""

    def __init__(self) -> None:
        self._unordered = PendingBaseQueue()
        self._ordered = PendingBaseQueue()
        self._n_bytes = 0
        self._selected = False
        self._unordered_is_selected = False

    def push(self, chunk: PayloadData) -> None:
        (self._unordered if chunk.unordered else self._ordered).push(chunk)
        self._n_bytes += len(chunk.user_data)

    def peek(self) -> PayloadData | None:
        """Return the chunk that should be sent next, or None."""
        if self._selected:
            queue = self._unordered if self._unordered_is_selected else self._ordered
            return queue.get(0)
        chunk = self._unordered.get(0)
        if chunk is not None:
            return chunk
        return self._ordered.get(0)

    def _pop_from(self, unordered: bool, chunk: PayloadData) -> PayloadData:
        queue = self._unordered if unordered else self._ordered
        popped = queue.pop()
        if popped is not chunk:
            kind = "unordered" if unordered else "ordered"
            raise PendingQueueError(f"unexpected chunk popped ({kind})")
        return popped

    def pop(self, chunk: PayloadData) -> None:
        """Remove ``chunk``, which must be the one ``peek`` returned."""
        if self._selected:
            popped = self._pop_from(self._unordered_is_selected, chunk)
            if popped.ending_fragment:
                self._selected = False
        else:
            if not chunk.beginning_fragment:
                raise PendingQueueError("unexpected q state (should've been selected)")
            popped = self._pop_from(chunk.unordered, chunk)
            if not popped.ending_fragment:
                self._selected = True
                self._unordered_is_selected = chunk.unordered
        self._n_bytes -= len(chunk.user_data)

    def num_bytes(self) -> int:
        """Total user data bytes held."""
        return self._n_bytes

    def __len__(self) -> int:
        return len(self._unordered) + len(self._ordered)