"""
Retrying HTTP executor for the search page.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import requests

from product_search.scraping.block_detector import BlockDetector
from product_search.scraping.cancellation import CancellationToken
from product_search.scraping.errors import FetchError, FetchTimeoutError, OperationCancelled
from product_search.scraping.identity import IdentityRotator
from product_search.scraping.logging_utils import log_event
from product_search.scraping.pacing import PacingController
from product_search.scraping.types import FetchAttempt, FetchOutcome, RawPage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class RequestExecutor:
    """
    Performs one fetch operation: paced, disguised, retried GETs.

    Each attempt draws a fresh identity. A response counts as success only
    when it has a 2xx status and the block detector classifies it clean;
    everything else consumes an attempt and triggers backoff.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        rotator: IdentityRotator,
        pacing: PacingController,
        block_detector: BlockDetector | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.rotator = rotator
        self.pacing = pacing
        self.block_detector = block_detector or BlockDetector()
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    def fetch(
        self,
        url: str,
        max_retries: int,
        *,
        cancellation: CancellationToken | None = None,
    ) -> RawPage:
        """
        Fetch ``url`` with at most ``max_retries`` network attempts.
        """

        if max_retries < 1:
            raise ValueError("max_retries must be at least 1.")

        history: list[FetchAttempt] = []
        try:
            self.pacing.initial_delay(cancellation=cancellation)

            for attempt in range(1, max_retries + 1):
                if cancellation is not None:
                    cancellation.raise_if_cancelled()

                record, page = self._attempt(url, attempt, cancellation)
                history.append(record)
                if page is not None:
                    log_event(
                        logger,
                        logging.INFO,
                        "fetch_succeeded",
                        url=url,
                        attempt=attempt,
                        status_code=page.status_code,
                        elapsed_seconds=round(record.elapsed_seconds, 3),
                    )
                    return page

                if attempt >= max_retries:
                    break

                low, high = self.pacing.backoff_window(attempt)
                log_event(
                    logger,
                    logging.WARNING,
                    "fetch_retry_scheduled",
                    url=url,
                    attempt=attempt,
                    max_retries=max_retries,
                    outcome=record.outcome.value,
                    wait_seconds_min=low,
                    wait_seconds_max=high,
                )
                self.pacing.backoff_delay(attempt, cancellation=cancellation)
        except OperationCancelled as exc:
            log_event(
                logger,
                logging.ERROR,
                "fetch_cancelled",
                url=url,
                attempts=len(history),
                reason=str(exc),
            )
            raise FetchTimeoutError(
                url=url,
                attempts=len(history),
                last_cause=str(exc),
                history=history,
            ) from exc

        last_cause = history[-1].cause if history else "no attempt made"
        log_event(
            logger,
            logging.ERROR,
            "fetch_exhausted_retries",
            url=url,
            attempts=len(history),
            last_cause=last_cause,
            blocked_attempts=sum(1 for item in history if item.outcome is FetchOutcome.BLOCKED),
        )
        raise FetchError(
            url=url,
            attempts=len(history),
            last_cause=last_cause or "unknown error",
            history=history,
        )

    def _attempt(
        self,
        url: str,
        attempt: int,
        cancellation: CancellationToken | None,
    ) -> tuple[FetchAttempt, RawPage | None]:
        identity = self.rotator.next()
        timeout = self._attempt_timeout(cancellation)
        started = self._clock()

        try:
            response = self.session.get(
                url,
                headers=identity.as_headers(),
                timeout=timeout,
                allow_redirects=True,
            )
        except requests.Timeout as exc:
            return self._failed(
                attempt=attempt,
                started=started,
                outcome=FetchOutcome.TIMEOUT,
                cause=f"timeout after {timeout:g}s: {exc}",
                user_agent=identity.user_agent,
                url=url,
            ), None
        except requests.RequestException as exc:
            return self._failed(
                attempt=attempt,
                started=started,
                outcome=FetchOutcome.NETWORK_ERROR,
                cause=f"network error: {exc}",
                user_agent=identity.user_agent,
                url=url,
            ), None

        page = RawPage.from_response(response)
        verdict = self.block_detector.classify(page)
        if verdict.blocked:
            return self._failed(
                attempt=attempt,
                started=started,
                outcome=FetchOutcome.BLOCKED,
                cause=f"blocked: {verdict.reason}",
                user_agent=identity.user_agent,
                url=url,
                status_code=page.status_code,
                event="fetch_blocked",
            ), None

        if not page.is_success:
            return self._failed(
                attempt=attempt,
                started=started,
                outcome=FetchOutcome.HTTP_ERROR,
                cause=f"unexpected status {page.status_code}",
                user_agent=identity.user_agent,
                url=url,
                status_code=page.status_code,
            ), None

        record = FetchAttempt(
            attempt=attempt,
            elapsed_seconds=self._clock() - started,
            outcome=FetchOutcome.SUCCESS,
            status_code=page.status_code,
            user_agent=identity.user_agent,
        )
        return record, page

    def _attempt_timeout(self, cancellation: CancellationToken | None) -> float:
        if cancellation is None:
            return self.timeout_seconds
        remaining = cancellation.remaining()
        if remaining is None:
            return self.timeout_seconds
        # urllib3 rejects timeouts <= 0
        return max(0.1, min(self.timeout_seconds, remaining))

    def _failed(
        self,
        *,
        attempt: int,
        started: float,
        outcome: FetchOutcome,
        cause: str,
        user_agent: str,
        url: str,
        status_code: int | None = None,
        event: str = "fetch_attempt_failed",
    ) -> FetchAttempt:
        record = FetchAttempt(
            attempt=attempt,
            elapsed_seconds=self._clock() - started,
            outcome=outcome,
            cause=cause,
            status_code=status_code,
            user_agent=user_agent,
        )
        log_event(
            logger,
            logging.WARNING,
            event,
            url=url,
            attempt=attempt,
            outcome=outcome.value,
            status_code=status_code,
            cause=cause,
            user_agent=user_agent,
        )
        return record
