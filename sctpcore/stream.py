"""An SCTP stream: outbound fragmentation and inbound message delivery."""

from __future__ import annotations

import abc
import enum
import logging
import threading
from typing import Callable, Sequence

from .payload_queue import PayloadData
from .reassembly_queue import ReassemblyQueue, ShortBufferError, TryAgainError

_MASK16 = 0xFFFF
_PPI_WEBRTC_DCEP = 50
_DELIVER_BUFFER_SIZE = 2000


class ReliabilityType(enum.IntEnum):
    """Reliability modes of a stream."""

    RELIABLE = 0
    REXMIT = 1
    TIMED = 2


class StreamClosedError(ConnectionError):
    """Raised when writing to a closed stream."""

    def __init__(self, message: str = "Stream closed") -> None:
        super().__init__(message)


class OutboundPacketTooLargeError(ValueError):
    """Raised when a message exceeds the association's maximum size."""


class AssociationLike(abc.ABC):
    """What a stream needs from the association that carries it."""

    @abc.abstractmethod
    def max_message_size(self) -> int:
        """Largest user message that may be written."""

    @abc.abstractmethod
    def max_payload_size(self) -> int:
        """Largest user data carried by one DATA chunk."""

    @abc.abstractmethod
    def is_shutting_down(self) -> bool:
        """Whether the association is in any shutdown state."""

    @abc.abstractmethod
    def send_payload_data(self, chunks: Sequence[PayloadData]) -> None:
        """Queue DATA chunks for sending."""

    @abc.abstractmethod
    def send_reset_request(self, stream_identifier: int) -> None:
        """Request a reset of the outgoing stream."""


class Stream:
    """One SCTP stream of an association."""

    def __init__(
        self,
        stream_identifier: int = 0,
        association: AssociationLike | None = None,
        default_payload_type: int = 0,
        name: str = "",
        logger: logging.Logger | None = None,
    ) -> None:
        self._stream_identifier = stream_identifier
        self.association = association
        self.default_payload_type = default_payload_type
        self.name = name
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._readable = threading.Condition(self._lock)
        self._reassembly_queue = ReassemblyQueue(stream_identifier)
        self._sequence_number = 0
        self._read_err: Exception | None = None
        self._write_err: Exception | None = None
        self._unordered = False
        self._reliability_type = int(ReliabilityType.RELIABLE)
        self._reliability_value = 0
        self._buffered_amount = 0
        self._buffered_amount_low = 0
        self._on_buffered_amount_low: Callable[[], None] | None = None
        self._deliver_cb: Callable[[bytes, int], None] | None = None

    @property
    def stream_identifier(self) -> int:
        return self._stream_identifier

    @property
    def unordered(self) -> bool:
        with self._lock:
            return self._unordered

    @property
    def reliability_type(self) -> int:
        with self._lock:
            return self._reliability_type

    @property
    def reliability_value(self) -> int:
        with self._lock:
            return self._reliability_value

    @property
    def buffered_amount_low_threshold(self) -> int:
        """Buffered byte count considered "low"; defaults to 0."""
        with self._lock:
            return self._buffered_amount_low

    @buffered_amount_low_threshold.setter
    def buffered_amount_low_threshold(self, value: int) -> None:
        with self._lock:
            self._buffered_amount_low = value

    def set_callback(self, callback: Callable[[bytes, int], None] | None) -> None:
        """Deliver complete messages to ``callback(data, ppi)`` as they arrive."""
        with self._lock:
            self._deliver_cb = callback

    def set_reliability_params(self, unordered: bool, rel_type: int, rel_val: int) -> None:
        """Set ordering and partial-reliability parameters."""
        with self._lock:
            self._log.debug(
                "[%s] reliability params: ordered=%s type=%d value=%d",
                self.name, not unordered, rel_type, rel_val,
            )
            self._unordered = unordered
            self._reliability_type = int(rel_type)
            self._reliability_value = rel_val

    def read(self, size: int) -> bytes:
        """Read one message of at most ``size`` bytes, dropping the PPI."""
        return self.read_sctp(size)[0]

    def read_sctp(self, size: int) -> tuple[bytes, int]:
        """Block until a message is ready; return its data and PPI.

        Raises ``EOFError`` once the stream is closed, and
        ``ShortBufferError`` if the message is longer than ``size``.
        """
        with self._readable:
            while True:
                try:
                    return self._reassembly_queue.read(size)
                except TryAgainError:
                    pass
                if self._read_err is not None:
                    raise self._read_err
                self._readable.wait()

    def _deliver(self) -> None:
        try:
            data, ppi = self._reassembly_queue.read(_DELIVER_BUFFER_SIZE)
        except (TryAgainError, ShortBufferError):
            return
        self._deliver_cb(data, ppi)

    def _notify_readable(self) -> None:
        if self._deliver_cb is not None:
            self._deliver()
        self._readable.notify()

    def handle_data(self, chunk: PayloadData) -> None:
        """Accept an inbound DATA chunk for this stream."""
        with self._lock:
            if not self._reassembly_queue.push(chunk):
                return
            readable = self._reassembly_queue.is_readable()
            self._log.debug("[%s] reassemblyQueue readable=%s", self.name, readable)
            if readable:
                self._notify_readable()

    def handle_forward_tsn_for_ordered(self, ssn: int) -> None:
        """Skip ordered messages up to ``ssn`` (ignored on unordered streams)."""
        with self._lock:
            if self._unordered:
                return
            self._reassembly_queue.forward_tsn_for_ordered(ssn)
            if self._reassembly_queue.is_readable():
                self._notify_readable()

    def handle_forward_tsn_for_unordered(self, new_cumulative_tsn: int) -> None:
        """Drop unordered fragments up to the TSN (ignored on ordered streams)."""
        with self._lock:
            if not self._unordered:
                return
            self._reassembly_queue.forward_tsn_for_unordered(new_cumulative_tsn)
            if self._reassembly_queue.is_readable():
                self._notify_readable()

    def _require_association(self) -> AssociationLike:
        if self.association is None:
            raise RuntimeError("stream is not attached to an association")
        return self.association

    def write(self, data: bytes) -> int:
        """Write ``data`` with the default payload protocol identifier."""
        return self.write_sctp(data, self.default_payload_type)

    def write_sctp(self, data: bytes, ppi: int) -> int:
        """Write ``data`` as one message with ``ppi``; return bytes written."""
        association = self._require_association()
        if len(data) > association.max_message_size():
            raise OutboundPacketTooLargeError(
                "outbound packet larger than maximum message size: 65535"
            )
        with self._lock:
            if association.is_shutting_down() and self._write_err is None:
                self._write_err = StreamClosedError()
            if self._write_err is not None:
                raise self._write_err
        chunks = self.packetize(data, ppi)
        association.send_payload_data(chunks)
        return len(data)

    def packetize(self, data: bytes, ppi: int) -> list[PayloadData]:
        """Split ``data`` into DATA chunks and count it as buffered."""
        max_payload = self._require_association().max_payload_size()
        data = bytes(data)
        with self._lock:
            # DCEP messages must be sent ordered and reliably.
            unordered = ppi != _PPI_WEBRTC_DCEP and self._unordered
            chunks: list[PayloadData] = []
            head: PayloadData | None = None
            for offset in range(0, len(data), max_payload):
                fragment = data[offset : offset + max_payload]
                chunk = PayloadData(
                    stream_identifier=self._stream_identifier,
                    user_data=fragment,
                    unordered=unordered,
                    beginning_fragment=offset == 0,
                    ending_fragment=offset + len(fragment) == len(data),
                    immediate_sack=False,
                    payload_type=ppi,
                    stream_sequence_number=self._sequence_number,
                    head=head,
                )
                if head is None:
                    head = chunk
                chunks.append(chunk)

            if not unordered:
                self._sequence_number = (self._sequence_number + 1) & _MASK16

            self._buffered_amount += len(data)
            self._log.debug("[%s] bufferedAmount = %d", self.name, self._buffered_amount)
            return chunks

    def close(self) -> None:
        """Close the write direction and wake readers; reset the stream once."""
        with self._lock:
            is_open = True
            if self._write_err is None:
                self._write_err = StreamClosedError()
            else:
                is_open = False
            if self._read_err is None:
                self._read_err = EOFError("EOF")
            else:
                is_open = False
            self._readable.notify_all()
            sid = self._stream_identifier
        if is_open and self.association is not None:
            self.association.send_reset_request(sid)

    def buffered_amount(self) -> int:
        """Bytes queued for sending and not yet acknowledged."""
        with self._lock:
            return self._buffered_amount

    def on_buffered_amount_low(self, callback: Callable[[], None] | None) -> None:
        """Call ``callback`` when the buffered amount drops to the threshold."""
        with self._lock:
            self._on_buffered_amount_low = callback

    def on_buffer_released(self, n_bytes: int) -> None:
        """Account for ``n_bytes`` of outbound data delivered to the peer."""
        if n_bytes <= 0:
            return
        with self._lock:
            from_amount = self._buffered_amount
            if self._buffered_amount < n_bytes:
                self._buffered_amount = 0
                self._log.error(
                    "[%s] released buffer size %d should be <= %d",
                    self.name, n_bytes, from_amount,
                )
            else:
                self._buffered_amount -= n_bytes
            self._log.debug("[%s] bufferedAmount = %d", self.name, self._buffered_amount)
            callback = self._on_buffered_amount_low
            fire = (
                callback is not None
                and from_amount > self._buffered_amount_low
                and self._buffered_amount <= self._buffered_amount_low
            )
        if fire:
            callback()

    def num_bytes_in_reassembly_queue(self) -> int:
        """Bytes received and not yet read."""
        return self._reassembly_queue.num_bytes()