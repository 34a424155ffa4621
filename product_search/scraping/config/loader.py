"""
Environment + JSON config loader for product search scraping.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from product_search.config import (
    get_float_env,
    get_int_env,
    get_optional_str_env,
    get_str_env,
)
from product_search.scraping.config.models import (
    PacingSettings,
    ProductSearchSettings,
    TargetSiteConfig,
)
from product_search.scraping.identity import (
    IdentityPool,
    identity_from_mapping,
    identity_from_user_agent,
)
from product_search.scraping.types import RequestIdentity


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_product_search_settings() -> ProductSearchSettings:
    """
    Return cached scraper settings from environment variables.
    """

    initial_min = max(0.0, get_float_env("SCRAPER_INITIAL_DELAY_MIN_SECONDS", 1.0))
    initial_max = max(initial_min, get_float_env("SCRAPER_INITIAL_DELAY_MAX_SECONDS", 2.0))
    identities_path = get_optional_str_env("SCRAPER_IDENTITIES_PATH")

    return ProductSearchSettings(
        target=TargetSiteConfig(
            base_url=get_str_env("SCRAPER_TARGET_BASE_URL", "https://www.amazon.com").rstrip("/"),
            domain=get_str_env("SCRAPER_TARGET_DOMAIN", "amazon.com").lower(),
            search_path=get_str_env("SCRAPER_SEARCH_PATH", "/s"),
            product_path_marker=get_str_env("SCRAPER_PRODUCT_PATH_MARKER", "/dp/"),
        ),
        pacing=PacingSettings(
            initial_delay_min_seconds=initial_min,
            initial_delay_max_seconds=initial_max,
            backoff_base_seconds=max(0.0, get_float_env("SCRAPER_BACKOFF_BASE_SECONDS", 2.0)),
            backoff_jitter_seconds=max(0.0, get_float_env("SCRAPER_BACKOFF_JITTER_SECONDS", 1.0)),
        ),
        timeout_seconds=max(1.0, get_float_env("SCRAPER_TIMEOUT_SECONDS", 10.0)),
        max_retries=max(1, get_int_env("SCRAPER_MAX_RETRIES", 3)),
        overall_timeout_seconds=max(1.0, get_float_env("SCRAPER_OVERALL_TIMEOUT_SECONDS", 60.0)),
        price_locale=get_str_env("SCRAPER_PRICE_LOCALE", "pt-BR"),
        identities_path=str(_resolve_config_path(identities_path)) if identities_path else None,
    )


def build_identity_pool(*, identities_path: str | None = None) -> IdentityPool:
    """
    Return the built-in identity pool extended with identities from a JSON file.
    """

    pool = IdentityPool()
    if not identities_path:
        return pool
    return pool.extended(load_identities(config_path=identities_path))


def load_identities(*, config_path: str) -> list[RequestIdentity]:
    """
    Load extra request identities from a JSON file.

    Entries are either a bare user-agent string or an object with
    ``user_agent`` and optional ``headers`` and ``name`` keys.
    """

    path = _resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Identity config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    entries = raw_data.get("identities", []) if isinstance(raw_data, dict) else raw_data
    if not isinstance(entries, list):
        raise ValueError("Invalid identity config: 'identities' must be a list.")

    parsed: list[RequestIdentity] = []
    for index, entry in enumerate(entries, start=1):
        if isinstance(entry, str):
            user_agent = entry.strip()
            if user_agent:
                parsed.append(identity_from_user_agent(user_agent, name=f"custom-{index}"))
            continue
        if not isinstance(entry, dict):
            continue

        user_agent = str(entry.get("user_agent", "")).strip()
        if not user_agent:
            continue
        name = _optional_str(entry.get("name")) or f"custom-{index}"
        headers = _normalize_headers(entry.get("headers"))
        if headers:
            parsed.append(identity_from_mapping(user_agent, headers, name=name))
        else:
            parsed.append(identity_from_user_agent(user_agent, name=name))

    return parsed


def _normalize_headers(headers: object) -> dict[str, str]:
    if not isinstance(headers, dict):
        return {}

    normalized: dict[str, str] = {}
    for key, value in headers.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        if key.strip() and value.strip():
            normalized[key.strip()] = value.strip()
    return normalized


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None
