"""
Caller-side deadline and cancel signal for one pipeline run.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from product_search.scraping.errors import OperationCancelled


class CancellationToken:
    """
    Combines an explicit cancel flag with an optional monotonic deadline.

    The token is owned by exactly one pipeline run. ``cancel()`` may be called
    from another thread; any ``sleep()`` in progress wakes up immediately.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._event = threading.Event()
        self._clock = clock
        self._timeout_seconds = timeout_seconds
        self._deadline = clock() + timeout_seconds if timeout_seconds is not None else None

    @property
    def timeout_seconds(self) -> float | None:
        return self._timeout_seconds

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    @property
    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def remaining(self) -> float | None:
        """
        Seconds left before the deadline, or ``None`` when no deadline is set.
        """

        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def reason(self) -> str:
        if self._event.is_set():
            return "cancelled by caller"
        return f"overall timeout of {self._timeout_seconds:g}s exceeded"

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelled(self.reason())

    def sleep(self, seconds: float) -> None:
        """
        Wait up to ``seconds``; raise ``OperationCancelled`` if the wait is cut short.
        """

        self.raise_if_cancelled()
        remaining = self.remaining()
        wait_seconds = max(0.0, seconds)
        if remaining is not None and remaining < wait_seconds:
            self._event.wait(remaining)
            raise OperationCancelled(self.reason())
        if self._event.wait(wait_seconds):
            raise OperationCancelled(self.reason())
