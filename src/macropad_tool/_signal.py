"""Cancellation of packet runs by SIGINT/SIGTERM.

A programming run must never stop in the middle of a report, so signals
only mark the run as cancelled. The device session checks the mark before
each packet and raises ProgrammingCancelledError with the progress made.
"""

from __future__ import annotations

import signal
import sys
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from macropad_tool.exceptions import ProgrammingCancelledError

if TYPE_CHECKING:
    from collections.abc import Generator


class PacketRun:
    """Progress of one ordered packet transmission.

    Attributes:
        total: Number of packets the run will write.
        sent: Number of packets written so far.
    """

    __slots__ = ("_cancelled", "sent", "total")

    def __init__(self, total: int) -> None:
        self._cancelled = threading.Event()
        self.total = total
        self.sent = 0

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._cancelled.is_set()

    @property
    def remaining(self) -> int:
        return self.total - self.sent

    def cancel(self) -> None:
        """Ask the run to stop before its next packet."""
        self._cancelled.set()

    def checkpoint(self) -> None:
        """Raise if the run was cancelled while packets remain.

        Raises:
            ProgrammingCancelledError: With the packets sent so far.
        """
        if self.cancelled and self.remaining > 0:
            raise ProgrammingCancelledError(self.sent, self.total)

    def advance(self) -> None:
        """Record one more packet as written."""
        self.sent += 1

    def pause(self, seconds: float) -> None:
        """Wait between packets; returns at once when cancelled."""
        self._cancelled.wait(seconds)


@contextmanager
def cancel_on_signal(run: PacketRun) -> Generator[PacketRun]:
    """Cancel a packet run on SIGINT or SIGTERM.

    The previous handlers are restored on exit.

    Example:
        with cancel_on_signal(PacketRun(len(packets))) as run:
            device.send_packets(packets, run)
    """

    def handler(signum: int, frame: object) -> None:
        run.cancel()

    old_sigint = signal.signal(signal.SIGINT, handler)
    old_sigterm = None
    if sys.platform != "win32":
        old_sigterm = signal.signal(signal.SIGTERM, handler)

    try:
        yield run
    finally:
        signal.signal(signal.SIGINT, old_sigint)
        if old_sigterm is not None:
            signal.signal(signal.SIGTERM, old_sigterm)
