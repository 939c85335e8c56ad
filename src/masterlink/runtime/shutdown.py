"""Process-wide shutdown signaling.

Waiting master calls poll a ShutdownFlag between attempts and abort with
SHUTTING_DOWN once it is set. Nothing is interrupted preemptively: an attempt
already in progress runs to completion.

Example:
    >>> flag = get_shutdown()
    >>> flag.install_signal_handlers()  # SIGINT/SIGTERM request shutdown
    >>> flag.is_shutting_down()
    False
"""

from __future__ import annotations

import signal
import threading
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from masterlink.runtime.observability import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import FrameType

log = get_logger("masterlink.shutdown")


@runtime_checkable
class ShutdownSignal(Protocol):
    """Anything that can report a pending shutdown."""

    def is_shutting_down(self) -> bool: ...


class ShutdownFlag:
    """Thread-safe, set-once shutdown flag."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def request(self, reason: str = "requested") -> None:
        if not self._event.is_set():
            log.info("shutdown requested", reason=reason)
        self._event.set()

    def is_shutting_down(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def reset(self) -> None:
        """Clear the flag (tests and embedded restarts only)."""
        self._event.clear()

    def install_signal_handlers(
        self, signals: Iterable[signal.Signals] = (signal.SIGINT, signal.SIGTERM)
    ) -> None:
        """Route termination signals to request(). Must be called from the main thread."""

        def handle_signal(signum: int, frame: FrameType | None) -> None:
            self.request(signal.Signals(signum).name)

        for sig in signals:
            signal.signal(sig, handle_signal)


_process_shutdown = ShutdownFlag()


def get_shutdown() -> ShutdownFlag:
    """The process-wide shutdown flag."""
    return _process_shutdown
