# sctpcore

Building blocks for an SCTP (Stream Control Transmission Protocol) stack,
in plain Python with no third-party dependencies.

## What is in the package

- `sctpcore.util`: `get_padding` and `pad_byte`, and serial-number
  arithmetic (RFC 1982) for 32- and 16-bit numbers: `sna32_lt`,
  `sna32_lte`, `sna32_gt`, `sna32_gte`, `sna32_eq` and the `sna16_*`
  counterparts.
- `sctpcore.paramtype`: the `ParamType` enumeration, `parse_param_type`
  (raises `ParamPacketTooShortError` on fewer than two bytes) and
  `describe_param_type`.
- `sctpcore.params`: encoding (`marshal()`) and decoding
  (`unmarshal(raw)`) of `ParamHeader`, `ParamReconfigResponse`,
  `ParamRequestedHmacAlgorithm`, `ParamStateCookie` (with
  `ParamStateCookie.random()` for a 32-byte random cookie) and
  `ParamSupportedExtensions`, plus the `ReconfigResult` and
  `HmacAlgorithm` enumerations. Malformed input raises `ParamError`.
- `sctpcore.payload_queue`: `PayloadData`, the DATA chunk payload with its
  transmission flags, and `PayloadQueue`, which holds chunks keyed by TSN,
  records duplicates, marks chunks acked or due for retransmission and
  produces `GapAckBlock`s.
- `sctpcore.pending_queue`: `PendingQueue`, the outbound queue. Unordered
  chunks go first, but once a fragmented message has started its queue
  stays selected until the last fragment. Popping a chunk out of turn
  raises `PendingQueueError`.
- `sctpcore.reassembly_queue`: `ChunkSet` and `ReassemblyQueue`, which
  rebuild user messages from fragments, ordered by SSN or unordered, and
  drop data skipped by a forward TSN. `read(size)` raises `TryAgainError`
  when nothing is ready and `ShortBufferError` (holding the part that fit)
  when the message is longer than `size`.
- `sctpcore.rtx_timer`: `RtoManager` (RFC 4960 section 6.3.1),
  `calculate_next_timeout`, and `RtxTimer`, a retransmission timer with
  exponential back-off that reports to an `RtxTimerObserver` from a
  background thread.
- `sctpcore.stream`: `Stream`, which splits writes into DATA chunks,
  reassembles incoming chunks into messages, blocks readers until a message
  is ready and tracks the buffered amount with a low-threshold callback.
  It talks to its association through the `AssociationLike` interface.

## Installation

```
pip install .
```

## Examples

Decode and re-encode a parameter:

```python
from sctpcore.params import ParamReconfigResponse, ReconfigResult

raw = bytes([0x00, 0x10, 0x00, 0x0C, 0, 0, 0, 1, 0, 0, 0, 1])
param = ParamReconfigResponse.unmarshal(raw)
assert param.result is ReconfigResult.SUCCESS_PERFORMED
assert param.marshal() == raw
```

Reassemble a fragmented message:

```python
from sctpcore.payload_queue import PayloadData
from sctpcore.reassembly_queue import ReassemblyQueue

rq = ReassemblyQueue(0)
rq.push(PayloadData(tsn=1, beginning_fragment=True, user_data=b"ABC"))
rq.push(PayloadData(tsn=2, ending_fragment=True, user_data=b"DEFG"))
data, ppi = rq.read(16)
assert data == b"ABCDEFG"
```

Write through one stream and read through another:

```python
from sctpcore.stream import AssociationLike, Stream


class LoopbackAssociation(AssociationLike):
    def __init__(self):
        self.sent = []

    def max_message_size(self):
        return 65536

    def max_payload_size(self):
        return 1200

    def is_shutting_down(self):
        return False

    def send_payload_data(self, chunks):
        self.sent.extend(chunks)

    def send_reset_request(self, stream_identifier):
        pass


association = LoopbackAssociation()
sender = Stream(1, association=association)
assert sender.write(b"x" * 3000) == 3000
assert len(association.sent) == 3
assert sender.buffered_amount() == 3000

receiver = Stream(1)
for tsn, chunk in enumerate(association.sent, start=1):
    chunk.tsn = tsn          # the association assigns TSNs
    receiver.handle_data(chunk)
assert receiver.read(4096) == b"x" * 3000
```

Compute retransmission timeouts:

```python
from sctpcore.rtx_timer import RtoManager, calculate_next_timeout

manager = RtoManager()
manager.set_new_rtt(600)
print(manager.rto())                    # 1800.0
print(calculate_next_timeout(1.0, 2))   # 4.0
```

## What the package does not do

There is no association here: no handshake, no association state machine,
no encoding of chunks or packets, no checksums, no congestion control and
no sockets. `Stream` only calls the `AssociationLike` object it is given;
assigning TSNs, sending chunks and handling acknowledgements is left to
that object.

## Running the tests

```
pip install ".[test]"
pytest
```