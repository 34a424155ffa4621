"""
HTML parsing layer exports.
"""

from product_search.scraping.parsing.html_parsers import ProductFieldExtractor, parse_document
from product_search.scraping.parsing.locators import CONTAINER_SELECTORS, Locator, LocatorChain

__all__ = [
    "CONTAINER_SELECTORS",
    "Locator",
    "LocatorChain",
    "ProductFieldExtractor",
    "parse_document",
]
