"""
Normalization layer exports.
"""

from product_search.scraping.normalization.field_normalizer import (
    CURRENCY_FORMATS,
    CurrencyFormat,
    FieldNormalizer,
    parse_price,
    parse_rating,
    parse_review_count,
)

__all__ = [
    "CURRENCY_FORMATS",
    "CurrencyFormat",
    "FieldNormalizer",
    "parse_price",
    "parse_rating",
    "parse_review_count",
]
