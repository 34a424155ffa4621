"""
Product search scraping engine.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import quote

import requests

from product_search.scraping.assembler import ResultAssembler
from product_search.scraping.block_detector import BlockDetector
from product_search.scraping.cancellation import CancellationToken
from product_search.scraping.config.models import ProductSearchSettings
from product_search.scraping.errors import KeywordValidationError
from product_search.scraping.fetcher import RequestExecutor
from product_search.scraping.identity import IdentityRotator
from product_search.scraping.logging_utils import log_event
from product_search.scraping.normalization import FieldNormalizer
from product_search.scraping.pacing import PacingController
from product_search.scraping.parsing import ProductFieldExtractor, parse_document
from product_search.scraping.types import ScrapeResult

logger = logging.getLogger(__name__)


def validate_keyword(keyword: str | None) -> str:
    """
    Return the trimmed keyword, rejecting missing or blank input.
    """

    if keyword is None or not keyword.strip():
        raise KeywordValidationError("Keyword parameter is required")
    return keyword.strip()


class ProductSearchEngine:
    """
    Runs fetch, classification, extraction, normalization and assembly for one keyword.

    Steps run strictly in sequence. The engine holds no per-run state, so one
    instance may serve concurrent runs; each run opens its own HTTP session.
    """

    def __init__(
        self,
        *,
        settings: ProductSearchSettings,
        rotator: IdentityRotator | None = None,
        pacing: PacingController | None = None,
        block_detector: BlockDetector | None = None,
        extractor: ProductFieldExtractor | None = None,
        normalizer: FieldNormalizer | None = None,
        assembler: ResultAssembler | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._settings = settings
        self._rotator = rotator or IdentityRotator()
        self._pacing = pacing or PacingController(settings=settings.pacing)
        self._block_detector = block_detector or BlockDetector()
        self._extractor = extractor or ProductFieldExtractor(target=settings.target)
        self._normalizer = normalizer or FieldNormalizer(locale=settings.price_locale)
        self._assembler = assembler or ResultAssembler()
        self._session_factory = session_factory

    def build_search_url(self, keyword: str) -> str:
        target = self._settings.target
        search_path = "/" + target.search_path.lstrip("/")
        return f"{target.base_url.rstrip('/')}{search_path}?k={quote(keyword, safe='')}"

    def run(
        self,
        keyword: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ScrapeResult:
        """
        Scrape the search page for ``keyword``.

        Raises ``KeywordValidationError`` before any network activity for a
        blank keyword, and ``FetchError`` when the page cannot be fetched.
        """

        search_term = validate_keyword(keyword)
        url = self.build_search_url(search_term)
        token = cancellation or CancellationToken(
            timeout_seconds=self._settings.overall_timeout_seconds
        )
        log_event(logger, logging.INFO, "search_scrape_started", keyword=search_term, url=url)

        with self._session_factory() as session:
            executor = RequestExecutor(
                session=session,
                rotator=self._rotator,
                pacing=self._pacing,
                block_detector=self._block_detector,
                timeout_seconds=self._settings.timeout_seconds,
            )
            page = executor.fetch(url, self._settings.max_retries, cancellation=token)

        soup = parse_document(page.body)
        extracted = self._extractor.extract(soup)
        normalized = [self._normalizer.normalize(product) for product in extracted]
        result = self._assembler.assemble(keyword, normalized)

        log_event(
            logger,
            logging.INFO,
            "search_scrape_completed",
            keyword=search_term,
            total_products=result.total_products,
            products_with_errors=sum(1 for record in result.products if record.errors),
        )
        return result
