"""Retransmission timeout calculation and the retransmission timer."""

from __future__ import annotations

import abc
import threading

RTO_INITIAL = 3.0 * 1000  # msec
RTO_MIN = 1.0 * 1000  # msec
RTO_MAX = 60.0 * 1000  # msec
RTO_ALPHA = 0.125
RTO_BETA = 0.25
MAX_INIT_RETRANS = 8
PATH_MAX_RETRANS = 5
NO_MAX_RETRANS = 0


class RtoManager:
    """Keeps the smoothed RTT estimate and derives the RTO (msec) from it."""

    def __init__(self) -> None:
        self.srtt = 0.0
        self.rttvar = 0.0
        self._rto = RTO_INITIAL
        self._no_update = False
        self._lock = threading.Lock()

    def set_new_rtt(self, rtt: float) -> float:
        """Feed a measured RTT (msec), update the RTO and return the SRTT."""
        with self._lock:
            if self._no_update:
                return self.srtt
            if self.srtt == 0:
                self.srtt = rtt
                self.rttvar = rtt / 2
            else:
                self.rttvar = (1 - RTO_BETA) * self.rttvar + RTO_BETA * abs(
                    self.srtt - rtt
                )
                self.srtt = (1 - RTO_ALPHA) * self.srtt + RTO_ALPHA * rtt
            self._rto = min(max(self.srtt + 4 * self.rttvar, RTO_MIN), RTO_MAX)
            return self.srtt

    def rto(self) -> float:
        """Return the current RTO in msec."""
        with self._lock:
            return self._rto

    def reset(self) -> None:
        """Return to the initial estimates unless updates are frozen."""
        with self._lock:
            if self._no_update:
                return
            self.srtt = 0.0
            self.rttvar = 0.0
            self._rto = RTO_INITIAL

    def set_rto(self, rto: float, no_update: bool) -> None:
        """Force the RTO; with ``no_update`` further measurements are ignored."""
        with self._lock:
            self._rto = rto
            self._no_update = no_update


class RtxTimerObserver(abc.ABC):
    """Receives timer events. Must not start or stop the timer from them."""

    @abc.abstractmethod
    def on_retransmission_timeout(self, timer_id: int, n_rtos: int) -> None:
        """Called on each expiry within the retransmission limit."""

    @abc.abstractmethod
    def on_retransmission_failure(self, timer_id: int) -> None:
        """Called once when the retransmission limit is exceeded."""


def calculate_next_timeout(rto: float, n_rtos: int) -> float:
    """Back off ``rto`` by doubling per expiry, capped at RTO.max."""
    if n_rtos < 31:
        return min(rto * (1 << n_rtos), RTO_MAX)
    return RTO_MAX


class RtxTimer:
    """Retransmission timer with exponential back-off.

    With ``max_retrans`` of 0 the timer keeps firing until stopped and never
    reports failure.
    """

    def __init__(self, timer_id: int, observer: RtxTimerObserver, max_retrans: int) -> None:
        self.timer_id = timer_id
        self.observer = observer
        self.max_retrans = max_retrans
        self._cancel: threading.Event | None = None
        self._closed = False
        self._lock = threading.Lock()

    def start(self, rto: float) -> bool:
        """Start the timer; return False if closed or already running."""
        with self._lock:
            if self._closed or self._cancel is not None:
                return False
            cancel = threading.Event()
            self._cancel = cancel
            threading.Thread(
                target=self._run, args=(rto, cancel), daemon=True
            ).start()
            return True

    def _run(self, rto: float, cancel: threading.Event) -> None:
        n_rtos = 0
        while not cancel.wait(calculate_next_timeout(rto, n_rtos) / 1000.0):
            if cancel.is_set():
                break
            n_rtos += 1
            if self.max_retrans == 0 or n_rtos <= self.max_retrans:
                self.observer.on_retransmission_timeout(self.timer_id, n_rtos)
            else:
                cancel.set()
                with self._lock:
                    if self._cancel is cancel:
                        self._cancel = None
                self.observer.on_retransmission_failure(self.timer_id)
                break

    def stop(self) -> None:
        """Stop the timer if it is running."""
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
                self._cancel = None

    def close(self) -> None:
        """Stop the timer for good; later ``start`` calls fail."""
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
                self._cancel = None
            self._closed = True

    def is_running(self) -> bool:
        """Whether the timer is currently running."""
        with self._lock:
            return self._cancel is not None