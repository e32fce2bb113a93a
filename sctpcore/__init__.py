"""SCTP building blocks: parameter codecs, queues, reassembly, timers and streams."""

__version__ = "0.1.0"
__all__ = [
    "util",
    "paramtype",
    "params",
    "payload_queue",
    "pending_queue",
    "reassembly_queue",
    "rtx_timer",
    "stream",
]