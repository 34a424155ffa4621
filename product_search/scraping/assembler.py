"""
Assembly of normalized products into the final scrape result.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from product_search.scraping.types import (
    FieldResult,
    NormalizedProduct,
    ProductRecord,
    ScrapeResult,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResultAssembler:
    """
    Numbers products in document order and stamps one batch timestamp.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def assemble(self, keyword: str, products: Sequence[NormalizedProduct]) -> ScrapeResult:
        timestamp = self._clock()
        ordered = sorted(products, key=lambda item: item.position)
        records = tuple(
            self._build_record(ordinal, product, timestamp)
            for ordinal, product in enumerate(ordered, start=1)
        )
        return ScrapeResult(keyword=keyword, products=records, timestamp=timestamp)

    @staticmethod
    def _build_record(
        ordinal: int,
        product: NormalizedProduct,
        timestamp: datetime,
    ) -> ProductRecord:
        # original_price and availability are legitimately absent on most cards
        # and are not reported as errors.
        reported: dict[str, FieldResult] = {
            "rating": product.rating,
            "review_count": product.review_count,
            "image_url": product.image_url,
            "price": product.price,
            "product_url": product.product_url,
        }
        errors = {
            name: result.reason
            for name, result in reported.items()
            if not result.present
        }
        return ProductRecord(
            id=ordinal,
            title=product.title,
            rating=product.rating.value,
            review_count=product.review_count.value,
            image_url=product.image_url.value or "",
            price=product.price.value,
            original_price=product.original_price.value,
            availability=product.availability.value,
            product_url=product.product_url.value or "",
            timestamp=timestamp,
            errors=errors,
        )
