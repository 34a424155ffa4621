"""
product_search/services/product_search_service.py

Service orchestration for keyword product search scraping.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from functools import lru_cache

from product_search.scraping.cancellation import CancellationToken
from product_search.scraping.config import (
    ProductSearchSettings,
    build_identity_pool,
    get_product_search_settings,
)
from product_search.scraping.engine import ProductSearchEngine
from product_search.scraping.errors import FetchError, FetchTimeoutError, KeywordValidationError
from product_search.scraping.identity import IdentityRotator
from product_search.scraping.logging_utils import log_event
from product_search.scraping.types import ScrapeFailure, ScrapeResult

logger = logging.getLogger(__name__)

INVALID_KEYWORD_ERROR = "Keyword parameter is required"
INVALID_KEYWORD_MESSAGE = "Please provide a valid search keyword"
FETCH_FAILED_ERROR = "Failed to scrape products"
TIMEOUT_ERROR = "Scrape timed out"
INTERNAL_ERROR = "Internal server error"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProductSearchService:
    """
    Runs the search pipeline and converts every failure into a ``ScrapeFailure``.
    """

    def __init__(
        self,
        *,
        settings: ProductSearchSettings | None = None,
        engine: ProductSearchEngine | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._settings = settings or get_product_search_settings()
        if engine is None:
            pool = build_identity_pool(identities_path=self._settings.identities_path)
            engine = ProductSearchEngine(
                settings=self._settings,
                rotator=IdentityRotator(pool),
            )
        self._engine = engine
        self._clock = clock

    def scrape(
        self,
        keyword: str | None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ScrapeResult | ScrapeFailure:
        if keyword is None or not keyword.strip():
            return self._failure(
                error=INVALID_KEYWORD_ERROR,
                message=INVALID_KEYWORD_MESSAGE,
                status_code=400,
            )

        try:
            return self._engine.run(keyword, cancellation=cancellation)
        except KeywordValidationError:
            return self._failure(
                error=INVALID_KEYWORD_ERROR,
                message=INVALID_KEYWORD_MESSAGE,
                status_code=400,
            )
        except FetchTimeoutError as exc:
            return self._failure(error=TIMEOUT_ERROR, message=str(exc), status_code=504)
        except FetchError as exc:
            return self._failure(error=FETCH_FAILED_ERROR, message=str(exc), status_code=500)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "search_scrape_failed",
                keyword=keyword,
                error=str(exc),
            )
            return self._failure(error=INTERNAL_ERROR, message=str(exc), status_code=500)

    def _failure(self, *, error: str, message: str, status_code: int) -> ScrapeFailure:
        return ScrapeFailure(
            error=error,
            message=message,
            timestamp=self._clock(),
            status_code=status_code,
        )


@lru_cache(maxsize=1)
def get_product_search_service() -> ProductSearchService:
    """
    Build and cache the product search service.
    """

    return ProductSearchService()
