"""
Exception types raised by the search scraping pipeline.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from product_search.scraping.types import FetchAttempt


class ScrapeError(RuntimeError):
    """
    Base class for pipeline-level failures.
    """


class KeywordValidationError(ScrapeError, ValueError):
    """
    Raised when the search keyword is missing or blank.
    """


class FetchError(ScrapeError):
    """
    Raised when the search page could not be fetched within the attempt budget.
    """

    def __init__(
        self,
        *,
        url: str,
        attempts: int,
        last_cause: str,
        history: Sequence["FetchAttempt"] = (),
    ) -> None:
        self.url = url
        self.attempts = attempts
        self.last_cause = last_cause
        self.history = tuple(history)
        super().__init__(
            f"Failed to fetch {url} after {attempts} attempt(s): {last_cause}"
        )


class FetchTimeoutError(FetchError):
    """
    Raised when the overall deadline expires or the caller cancels the fetch.
    """


class OperationCancelled(Exception):
    """
    Internal signal raised by a cancellation token while a fetch is in flight.
    """
