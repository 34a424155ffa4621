"""
Declarative locator tables for search-result product cards.

Each field owns an ordered chain of locators; the first locator that yields a
usable value wins. Keep the most specific selectors first: the generic ones
at the end of a chain exist for markup drift, not for the common case.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from bs4 import Tag

from product_search.scraping.types import FieldResult

_HAS_DIGIT = re.compile(r"\d")
_HAS_WORD = re.compile(r"[^\W\d_]{3,}")
_NOT_DATA_URI = re.compile(r"^(?!data:)", flags=re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def clean_text(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


@dataclass(frozen=True)
class Locator:
    """
    A CSS selector plus an optional attribute to read instead of the element text.

    ``pattern``, when set, must match the value for the locator to count as a hit.
    """

    selector: str
    attribute: str | None = None
    pattern: re.Pattern[str] | None = None

    def values(self, node: Tag) -> list[str]:
        found: list[str] = []
        for element in node.select(self.selector):
            if self.attribute:
                raw = element.get(self.attribute)
                if isinstance(raw, list):
                    raw = " ".join(raw)
            else:
                raw = element.get_text(" ", strip=True)
            value = clean_text(raw or "")
            if not value:
                continue
            if self.pattern is not None and not self.pattern.search(value):
                continue
            found.append(value)
        return found


@dataclass(frozen=True)
class LocatorChain:
    """
    Ordered fallback locators for one semantic field.
    """

    label: str
    locators: tuple[Locator, ...]

    def first(
        self,
        node: Tag,
        accept: Callable[[str], str | None] | None = None,
    ) -> FieldResult[str]:
        """
        Return the first accepted value, or a reason describing why none was found.

        ``accept`` maps a raw value to the value to keep, or ``None`` to reject
        it and keep searching.
        """

        rejected: list[str] = []
        for locator in self.locators:
            for value in locator.values(node):
                if accept is None:
                    return FieldResult.ok(value)
                accepted = accept(value)
                if accepted is not None:
                    return FieldResult.ok(accepted)
                rejected.append(value)

        if rejected:
            return FieldResult.missing(f"{self.label} rejected: {rejected[0]}")
        return FieldResult.missing(
            f"{self.label} not found (tried {len(self.locators)} locators)"
        )


CONTAINER_SELECTORS: tuple[str, ...] = (
    '[data-component-type="s-search-result"]',
    '.s-result-item[data-component-type="s-search-result"]',
    ".s-result-item",
    "[data-asin]",
    ".sg-col-inner .s-result-item",
    ".s-main-slot .s-result-item",
    ".s-desktop-toolbar .s-result-item",
)

TITLE = LocatorChain(
    label="Title",
    locators=(
        Locator("h2 a span"),
        Locator(".a-size-medium"),
        Locator(".a-size-base-plus"),
        Locator("h2"),
        Locator(".a-text-normal"),
        Locator('[data-cy="title-recipe"]'),
    ),
)

IMAGE = LocatorChain(
    label="Image",
    locators=(
        Locator("img.s-image[src]", "src", _NOT_DATA_URI),
        Locator("img[src]", "src", _NOT_DATA_URI),
        Locator("img[data-src]", "data-src", _NOT_DATA_URI),
        Locator("img[data-lazy-src]", "data-lazy-src", _NOT_DATA_URI),
        Locator("img[data-old-hires]", "data-old-hires", _NOT_DATA_URI),
    ),
)

RATING = LocatorChain(
    label="Rating",
    locators=(
        Locator(".a-icon-alt", pattern=_HAS_DIGIT),
        Locator('[aria-label*="out of 5"]', "aria-label", _HAS_DIGIT),
        Locator('[aria-label*="stars"]', "aria-label", _HAS_DIGIT),
        Locator(".a-icon-star", pattern=_HAS_DIGIT),
        Locator(".a-icon-star-small", pattern=_HAS_DIGIT),
        Locator(".a-star-rating", pattern=_HAS_DIGIT),
    ),
)

REVIEW_COUNT = LocatorChain(
    label="Review count",
    locators=(
        Locator('a[href*="customerReviews"] .s-underline-text', pattern=_HAS_DIGIT),
        Locator(".a-size-base.s-underline-text", pattern=_HAS_DIGIT),
        Locator('[aria-label*="ratings"]', "aria-label", _HAS_DIGIT),
        Locator('[aria-label*="reviews"]', "aria-label", _HAS_DIGIT),
        Locator(".a-link-normal .a-size-base", pattern=_HAS_DIGIT),
        Locator(".a-size-base", pattern=_HAS_DIGIT),
    ),
)

PRICE = LocatorChain(
    label="Price",
    locators=(
        Locator(".a-price:not(.a-text-price) .a-offscreen", pattern=_HAS_DIGIT),
        Locator(".a-price .a-offscreen", pattern=_HAS_DIGIT),
        Locator(".a-price-whole", pattern=_HAS_DIGIT),
        Locator(".a-price", pattern=_HAS_DIGIT),
        Locator(".a-price-range", pattern=_HAS_DIGIT),
        Locator(".a-color-price", pattern=_HAS_DIGIT),
    ),
)

ORIGINAL_PRICE = LocatorChain(
    label="Original price",
    locators=(
        Locator(".a-price.a-text-price .a-offscreen", pattern=_HAS_DIGIT),
        Locator(".a-text-strike", pattern=_HAS_DIGIT),
    ),
)

AVAILABILITY = LocatorChain(
    label="Availability",
    locators=(
        Locator(".a-color-success", pattern=_HAS_WORD),
        Locator(".a-color-price", pattern=_HAS_WORD),
    ),
)

PRODUCT_LINK = LocatorChain(
    label="Product link",
    locators=(
        Locator("h2 a[href]", "href"),
        Locator('a[href*="/dp/"]', "href"),
        Locator("a[data-asin][href]", "href"),
        Locator("a.a-link-normal[href]", "href"),
    ),
)
