"""
BeautifulSoup-based field extraction for search-result pages.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from product_search.scraping.config.models import TargetSiteConfig
from product_search.scraping.logging_utils import log_event
from product_search.scraping.parsing.locators import (
    AVAILABILITY,
    CONTAINER_SELECTORS,
    IMAGE,
    ORIGINAL_PRICE,
    PRICE,
    PRODUCT_LINK,
    RATING,
    REVIEW_COUNT,
    TITLE,
    LocatorChain,
    clean_text,
)
from product_search.scraping.types import ExtractedProduct

logger = logging.getLogger(__name__)

DEFAULT_FIELD_CHAINS: Mapping[str, LocatorChain] = {
    "title": TITLE,
    "image_url": IMAGE,
    "rating": RATING,
    "review_count": REVIEW_COUNT,
    "price": PRICE,
    "original_price": ORIGINAL_PRICE,
    "availability": AVAILABILITY,
    "product_url": PRODUCT_LINK,
}


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class ProductFieldExtractor:
    """
    Locates product cards and pulls raw field values out of each one.

    The first container selector with at least one match is used for the
    whole page; cards from different selectors are never mixed.
    """

    def __init__(
        self,
        *,
        target: TargetSiteConfig | None = None,
        container_selectors: tuple[str, ...] = CONTAINER_SELECTORS,
        field_chains: Mapping[str, LocatorChain] | None = None,
    ) -> None:
        self.target = target or TargetSiteConfig()
        self.container_selectors = container_selectors
        self.field_chains = {**DEFAULT_FIELD_CHAINS, **(field_chains or {})}

    def extract(self, soup: BeautifulSoup) -> list[ExtractedProduct]:
        selector, candidates = self.find_candidates(soup)
        if selector is None:
            log_event(
                logger,
                logging.WARNING,
                "no_product_containers",
                selectors_tried=len(self.container_selectors),
                page_title=self._page_title(soup),
            )
            return []

        products: list[ExtractedProduct] = []
        dropped = 0
        for position, node in enumerate(candidates):
            product = self.extract_candidate(node, position=position)
            if product is None:
                dropped += 1
                continue
            products.append(product)

        log_event(
            logger,
            logging.INFO,
            "products_extracted",
            container_selector=selector,
            candidates=len(candidates),
            extracted=len(products),
            dropped_without_title=dropped,
        )
        return products

    def find_candidates(self, soup: BeautifulSoup) -> tuple[str | None, list[Tag]]:
        for selector in self.container_selectors:
            found = soup.select(selector)
            if found:
                return selector, found
        return None, []

    def extract_candidate(self, node: Tag, *, position: int) -> ExtractedProduct | None:
        """
        Extract one card; ``None`` when the card has no title.
        """

        title = self.field_chains["title"].first(node)
        if not title.present:
            return None

        return ExtractedProduct(
            position=position,
            title=title.value,
            image_url=self.field_chains["image_url"].first(node, accept=self.normalize_image_url),
            rating_text=self.field_chains["rating"].first(node),
            review_count_text=self.field_chains["review_count"].first(node),
            price_text=self.field_chains["price"].first(node),
            original_price_text=self.field_chains["original_price"].first(node),
            availability=self.field_chains["availability"].first(node),
            product_url=self.field_chains["product_url"].first(node, accept=self.resolve_product_url),
        )

    def resolve_product_url(self, href: str) -> str | None:
        """
        Absolute product URL on the target site, or ``None`` for anything else.
        """

        candidate = href.strip()
        if not candidate or candidate.startswith(("#", "javascript:", "mailto:")):
            return None

        resolved = urljoin(f"{self.target.base_url.rstrip('/')}/", candidate)
        parsed = urlparse(resolved)
        if parsed.scheme not in {"http", "https"}:
            return None

        host = (parsed.hostname or "").lower()
        domain = self.target.domain.lower()
        if host != domain and not host.endswith(f".{domain}"):
            return None
        if self.target.product_path_marker not in parsed.path:
            return None
        return resolved

    @staticmethod
    def normalize_image_url(src: str) -> str | None:
        value = src.strip()
        if not value:
            return None
        if value.startswith("//"):
            return f"https:{value}"
        return value

    @staticmethod
    def _page_title(soup: BeautifulSoup) -> str | None:
        if soup.title is None:
            return None
        return clean_text(soup.title.get_text(" ", strip=True)) or None
