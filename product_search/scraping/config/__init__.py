"""
Config helpers for product search scraping.
"""

from product_search.scraping.config.loader import (
    build_identity_pool,
    get_product_search_settings,
    load_identities,
)
from product_search.scraping.config.models import (
    PacingSettings,
    ProductSearchSettings,
    TargetSiteConfig,
)

__all__ = [
    "PacingSettings",
    "ProductSearchSettings",
    "TargetSiteConfig",
    "build_identity_pool",
    "get_product_search_settings",
    "load_identities",
]
