"""
product_search/schemas package marker.
"""

from product_search.schemas.product_search import (
    ErrorResponse,
    ProductRecordResponse,
    ScrapeResponse,
)

__all__ = [
    "ErrorResponse",
    "ProductRecordResponse",
    "ScrapeResponse",
]
