"""
Browser identity pool and per-attempt rotation.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping

from product_search.scraping.types import RequestIdentity

MIN_POOL_SIZE = 5

_NAVIGATION_HEADERS: tuple[tuple[str, str], ...] = (
    ("Accept-Encoding", "gzip, deflate, br"),
    ("Connection", "keep-alive"),
    ("Upgrade-Insecure-Requests", "1"),
    ("Sec-Fetch-Dest", "document"),
    ("Sec-Fetch-Mode", "navigate"),
    ("Sec-Fetch-Site", "none"),
    ("Sec-Fetch-User", "?1"),
    ("Cache-Control", "max-age=0"),
)

_CHROMIUM_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8"
)
_FIREFOX_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
_SAFARI_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _chromium_headers(*, brand: str, version: str, platform: str) -> tuple[tuple[str, str], ...]:
    return (
        ("Accept", _CHROMIUM_ACCEPT),
        ("Accept-Language", "en-US,en;q=0.9,pt-BR;q=0.8,pt;q=0.7"),
        *_NAVIGATION_HEADERS,
        ("sec-ch-ua", f'"Not_A Brand";v="8", "Chromium";v="{version}", "{brand}";v="{version}"'),
        ("sec-ch-ua-mobile", "?0"),
        ("sec-ch-ua-platform", f'"{platform}"'),
    )


def _firefox_headers() -> tuple[tuple[str, str], ...]:
    return (
        ("Accept", _FIREFOX_ACCEPT),
        ("Accept-Language", "en-US,en;q=0.5"),
        ("DNT", "1"),
        *_NAVIGATION_HEADERS,
    )


def _safari_headers() -> tuple[tuple[str, str], ...]:
    return (
        ("Accept", _SAFARI_ACCEPT),
        ("Accept-Language", "en-US,en;q=0.9"),
        ("Accept-Encoding", "gzip, deflate, br"),
        ("Connection", "keep-alive"),
        ("Sec-Fetch-Dest", "document"),
        ("Sec-Fetch-Mode", "navigate"),
        ("Sec-Fetch-Site", "none"),
    )


DEFAULT_IDENTITIES: tuple[RequestIdentity, ...] = (
    RequestIdentity(
        name="chrome-windows",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        headers=_chromium_headers(brand="Google Chrome", version="120", platform="Windows"),
    ),
    RequestIdentity(
        name="chrome-macos",
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        headers=_chromium_headers(brand="Google Chrome", version="120", platform="macOS"),
    ),
    RequestIdentity(
        name="chrome-linux",
        user_agent=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        headers=_chromium_headers(brand="Google Chrome", version="120", platform="Linux"),
    ),
    RequestIdentity(
        name="firefox-windows",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0",
        headers=_firefox_headers(),
    ),
    RequestIdentity(
        name="firefox-macos",
        user_agent="Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:109.0) Gecko/20100101 Firefox/121.0",
        headers=_firefox_headers(),
    ),
    RequestIdentity(
        name="edge-windows",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
        ),
        headers=_chromium_headers(brand="Microsoft Edge", version="120", platform="Windows"),
    ),
    RequestIdentity(
        name="safari-macos",
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
        ),
        headers=_safari_headers(),
    ),
)


def identity_from_user_agent(user_agent: str, *, name: str | None = None) -> RequestIdentity:
    """
    Build an identity for a bare user-agent, deriving headers from its browser family.
    """

    lowered = user_agent.lower()
    if "firefox/" in lowered:
        headers = _firefox_headers()
    elif "edg/" in lowered:
        headers = _chromium_headers(brand="Microsoft Edge", version="120", platform="Windows")
    elif "chrome/" in lowered or "chromium/" in lowered:
        headers = _chromium_headers(brand="Google Chrome", version="120", platform="Windows")
    elif "safari/" in lowered:
        headers = _safari_headers()
    else:
        headers = _firefox_headers()
    return RequestIdentity(name=name or "custom", user_agent=user_agent, headers=headers)


def identity_from_mapping(
    user_agent: str,
    headers: Mapping[str, str],
    *,
    name: str | None = None,
) -> RequestIdentity:
    """
    Build an identity from an explicit header set.
    """

    cleaned = tuple(
        (key, value)
        for key, value in headers.items()
        if key.strip().lower() != "user-agent"
    )
    return RequestIdentity(name=name or "custom", user_agent=user_agent, headers=cleaned)


class IdentityPool:
    """
    Immutable snapshot of request identities.

    Extending a pool returns a new pool so rotators already handed to running
    pipelines keep seeing the snapshot they were built with.
    """

    def __init__(self, identities: Iterable[RequestIdentity] = DEFAULT_IDENTITIES) -> None:
        snapshot = tuple(identities)
        if len(snapshot) < MIN_POOL_SIZE:
            raise ValueError(
                f"Identity pool needs at least {MIN_POOL_SIZE} identities, got {len(snapshot)}."
            )
        self._identities = snapshot

    @property
    def identities(self) -> tuple[RequestIdentity, ...]:
        return self._identities

    def __len__(self) -> int:
        return len(self._identities)

    def extended(self, identities: Iterable[RequestIdentity]) -> "IdentityPool":
        return IdentityPool((*self._identities, *identities))


class IdentityRotator:
    """
    Uniform random selection, with replacement, from an identity pool.
    """

    def __init__(self, pool: IdentityPool | None = None, *, rng: random.Random | None = None) -> None:
        self._pool = pool or IdentityPool()
        self._rng = rng or random.Random()

    @property
    def pool(self) -> IdentityPool:
        return self._pool

    def next(self) -> RequestIdentity:
        return self._rng.choice(self._pool.identities)
