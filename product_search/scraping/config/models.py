"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TargetSiteConfig:
    """
    The single e-commerce site the pipeline scrapes.
    """

    base_url: str = "https://www.amazon.com"
    domain: str = "amazon.com"
    search_path: str = "/s"
    product_path_marker: str = "/dp/"


@dataclass(frozen=True)
class PacingSettings:
    """
    Delay windows, in seconds, applied around fetch attempts.
    """

    initial_delay_min_seconds: float = 1.0
    initial_delay_max_seconds: float = 2.0
    backoff_base_seconds: float = 2.0
    backoff_jitter_seconds: float = 1.0


@dataclass(frozen=True)
class ProductSearchSettings:
    """
    Runtime settings for product search scraping.
    """

    target: TargetSiteConfig
    pacing: PacingSettings
    timeout_seconds: float = 10.0
    max_retries: int = 3
    overall_timeout_seconds: float = 60.0
    price_locale: str = "pt-BR"
    identities_path: str | None = None
