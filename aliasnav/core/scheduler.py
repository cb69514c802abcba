"""Deferred callback scheduling for debounced evaluation

Classes:
    Scheduler:
        Protocol: schedule(delay, callback) -> handle, cancel(handle).
    TimerScheduler:
        Default implementation built on threading.Timer daemon timers.
"""

import threading
from collections.abc import Callable
from typing import Any, Protocol


class Scheduler(Protocol):
    """Protocol for schedulers to allow swapping the timing source (e.g. in tests)."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Any:
        """Run callback once after `delay` seconds and return a cancellation handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Cancelling a fired or cancelled handle is a no-op."""
        ...


class TimerScheduler:
    """Scheduler running callbacks on daemon threading.Timer threads"""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(delay, 0.0), callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()
