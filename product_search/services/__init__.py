"""
product_search/services package marker.
"""

from product_search.services.product_search_service import (
    ProductSearchService,
    get_product_search_service,
)

__all__ = [
    "ProductSearchService",
    "get_product_search_service",
]
