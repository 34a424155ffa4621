"""
Randomized request pacing and retry backoff.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable

from product_search.scraping.cancellation import CancellationToken
from product_search.scraping.config.models import PacingSettings


class PacingController:
    """
    Suspends the calling pipeline for human-looking, jittered intervals.

    ``sleep`` and ``rng`` are injectable so tests can record the computed
    delays instead of waiting on the real clock.
    """

    def __init__(
        self,
        *,
        settings: PacingSettings | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._settings = settings or PacingSettings()
        self._rng = rng or random.Random()
        self._sleep = sleep

    @property
    def settings(self) -> PacingSettings:
        return self._settings

    def delay(
        self,
        min_seconds: float,
        max_seconds: float,
        *,
        cancellation: CancellationToken | None = None,
    ) -> float:
        """
        Sleep for a uniformly random duration in ``[min_seconds, max_seconds]``.

        Returns the chosen duration. With a cancellation token the wait ends
        early, raising ``OperationCancelled``, when the token fires.
        """

        low = max(0.0, min(min_seconds, max_seconds))
        high = max(low, max_seconds)
        seconds = self._rng.uniform(low, high)

        if self._sleep is not None:
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            self._sleep(seconds)
            if cancellation is not None:
                cancellation.raise_if_cancelled()
        elif cancellation is not None:
            cancellation.sleep(seconds)
        else:
            time.sleep(seconds)
        return seconds

    def initial_delay(self, *, cancellation: CancellationToken | None = None) -> float:
        return self.delay(
            self._settings.initial_delay_min_seconds,
            self._settings.initial_delay_max_seconds,
            cancellation=cancellation,
        )

    def backoff_window(self, attempt: int) -> tuple[float, float]:
        """
        Delay window after the 1-based ``attempt`` failed: ``base * 2**attempt`` plus jitter.
        """

        low = self._settings.backoff_base_seconds * (2 ** max(0, attempt))
        return low, low + self._settings.backoff_jitter_seconds

    def backoff_delay(
        self,
        attempt: int,
        *,
        cancellation: CancellationToken | None = None,
    ) -> float:
        low, high = self.backoff_window(attempt)
        return self.delay(low, high, cancellation=cancellation)
