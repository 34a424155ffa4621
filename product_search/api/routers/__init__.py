"""
product_search/api/routers package marker.
"""

from product_search.api.routers.product_search import router as product_search_router

__all__ = [
    "product_search_router",
]
