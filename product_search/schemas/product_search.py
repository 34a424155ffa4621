"""
product_search/schemas/product_search.py

Response schemas for product search scraping.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from product_search.scraping.types import ProductRecord, ScrapeFailure, ScrapeResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductRecordResponse(_CamelModel):
    """
    One product as consumed by the rendering layer.
    """

    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    rating: float | None = Field(default=None, ge=0, le=5)
    review_count: int | None = Field(default=None, ge=0)
    image_url: str = ""
    price: str | None = None
    original_price: str | None = None
    availability: str | None = None
    product_url: str = ""
    timestamp: datetime
    errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductRecordResponse":
        return cls(
            id=record.id,
            title=record.title,
            rating=record.rating,
            review_count=record.review_count,
            image_url=record.image_url,
            price=record.price,
            original_price=record.original_price,
            availability=record.availability,
            product_url=record.product_url,
            timestamp=record.timestamp,
            errors={to_camel(name): reason for name, reason in record.errors.items()},
        )


class ScrapeResponse(_CamelModel):
    """
    Successful scrape payload.
    """

    success: bool = True
    keyword: str
    total_products: int = Field(..., ge=0)
    products: list[ProductRecordResponse] = Field(default_factory=list)
    timestamp: datetime

    @classmethod
    def from_result(cls, result: ScrapeResult) -> "ScrapeResponse":
        return cls(
            success=True,
            keyword=result.keyword,
            total_products=result.total_products,
            products=[ProductRecordResponse.from_record(record) for record in result.products],
            timestamp=result.timestamp,
        )


class ErrorResponse(BaseModel):
    """
    Failure payload shared by every error path of the API.
    """

    success: bool = False
    error: str
    message: str
    timestamp: datetime

    @classmethod
    def from_failure(cls, failure: ScrapeFailure) -> "ErrorResponse":
        return cls(
            success=False,
            error=failure.error,
            message=failure.message,
            timestamp=failure.timestamp,
        )
