"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RequestIdentity:
    """
    One browser fingerprint: a user-agent plus the headers that browser sends.
    """

    name: str
    user_agent: str
    headers: tuple[tuple[str, str], ...]

    def as_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, **dict(self.headers)}


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network-error"
    HTTP_ERROR = "http-error"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class FetchAttempt:
    """
    Transient record of one HTTP attempt inside a fetch operation.
    """

    attempt: int
    elapsed_seconds: float
    outcome: FetchOutcome
    cause: str | None = None
    status_code: int | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class RawPage:
    """
    Fetched HTML body with response metadata.
    """

    url: str
    status_code: int
    headers: Mapping[str, str]
    body: str

    @classmethod
    def from_response(cls, response: Any) -> "RawPage":
        headers = {str(key).lower(): str(value) for key, value in response.headers.items()}
        return cls(
            url=str(response.url or ""),
            status_code=int(response.status_code),
            headers=headers,
            body=response.text or "",
        )

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class PageStatus(str, Enum):
    CLEAN = "clean"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class BlockVerdict:
    status: PageStatus
    reason: str | None = None

    @property
    def blocked(self) -> bool:
        return self.status is PageStatus.BLOCKED


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """
    Either an extracted value or the reason it could not be extracted.
    """

    value: T | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.reason is None):
            raise ValueError("FieldResult requires exactly one of value or reason.")

    @classmethod
    def ok(cls, value: T) -> "FieldResult[T]":
        return cls(value=value)

    @classmethod
    def missing(cls, reason: str) -> "FieldResult[T]":
        return cls(reason=reason)

    @property
    def present(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ExtractedProduct:
    """
    Raw field text pulled out of one product card, before normalization.
    """

    position: int
    title: str
    image_url: FieldResult[str]
    rating_text: FieldResult[str]
    review_count_text: FieldResult[str]
    price_text: FieldResult[str]
    original_price_text: FieldResult[str]
    availability: FieldResult[str]
    product_url: FieldResult[str]


@dataclass(frozen=True)
class NormalizedProduct:
    """
    Typed field values for one product, in document position order.
    """

    position: int
    title: str
    rating: FieldResult[float]
    review_count: FieldResult[int]
    image_url: FieldResult[str]
    price: FieldResult[str]
    original_price: FieldResult[str]
    availability: FieldResult[str]
    product_url: FieldResult[str]


@dataclass(frozen=True)
class ProductRecord:
    """
    Output unit for one product found on the search page.
    """

    id: int
    title: str
    rating: float | None
    review_count: int | None
    image_url: str
    price: str | None
    original_price: str | None
    availability: str | None
    product_url: str
    timestamp: datetime
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScrapeResult:
    """
    Terminal artifact of one successful pipeline run.
    """

    keyword: str
    products: tuple[ProductRecord, ...]
    timestamp: datetime
    success: bool = True

    @property
    def total_products(self) -> int:
        return len(self.products)


@dataclass(frozen=True)
class ScrapeFailure:
    """
    Caller-facing error outcome of one pipeline run.
    """

    error: str
    message: str
    timestamp: datetime
    status_code: int = 500
    success: bool = False
