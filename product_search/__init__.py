"""
Keyword search scraping for a single e-commerce target.
"""

__version__ = "1.0.0"
