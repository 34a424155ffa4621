from __future__ import annotations

import random
from collections import Counter

import pytest

from product_search.scraping.identity import (
    DEFAULT_IDENTITIES,
    MIN_POOL_SIZE,
    IdentityPool,
    IdentityRotator,
    identity_from_mapping,
    identity_from_user_agent,
)


class TestIdentityPool:
    def test_default_pool_meets_minimum_size(self) -> None:
        assert len(IdentityPool()) >= MIN_POOL_SIZE

    def test_rejects_small_pool(self) -> None:
        with pytest.raises(ValueError):
            IdentityPool(DEFAULT_IDENTITIES[: MIN_POOL_SIZE - 1])

    def test_extended_returns_new_snapshot(self) -> None:
        pool = IdentityPool()
        custom = identity_from_user_agent("Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0")

        extended = pool.extended([custom])

        assert len(extended) == len(pool) + 1
        assert custom in extended.identities
        assert custom not in pool.identities

    def test_every_default_identity_has_browser_headers(self) -> None:
        for identity in DEFAULT_IDENTITIES:
            headers = identity.as_headers()
            assert headers["User-Agent"] == identity.user_agent
            assert "Accept" in headers
            assert "Accept-Language" in headers
            assert headers["Sec-Fetch-Mode"] == "navigate"

    def test_chromium_identities_send_client_hints(self) -> None:
        chromium = [identity for identity in DEFAULT_IDENTITIES if "Chrome/" in identity.user_agent]
        assert chromium
        for identity in chromium:
            assert "sec-ch-ua" in identity.as_headers()

    def test_firefox_identities_do_not_send_client_hints(self) -> None:
        firefox = [identity for identity in DEFAULT_IDENTITIES if "Firefox/" in identity.user_agent]
        assert firefox
        for identity in firefox:
            assert "sec-ch-ua" not in identity.as_headers()


class TestIdentityFactories:
    def test_bare_firefox_user_agent_gets_firefox_headers(self) -> None:
        identity = identity_from_user_agent("Mozilla/5.0 (Windows NT 10.0; rv:122.0) Gecko/20100101 Firefox/122.0")
        assert identity.as_headers()["Accept-Language"] == "en-US,en;q=0.5"

    def test_explicit_headers_drop_user_agent_key(self) -> None:
        identity = identity_from_mapping(
            "CustomAgent/1.0",
            {"User-Agent": "ignored", "Accept": "text/html"},
            name="custom",
        )
        headers = identity.as_headers()
        assert headers["User-Agent"] == "CustomAgent/1.0"
        assert headers["Accept"] == "text/html"


class TestIdentityRotator:
    def test_next_returns_pool_members(self) -> None:
        rotator = IdentityRotator(rng=random.Random(0))
        for _ in range(50):
            assert rotator.next() in DEFAULT_IDENTITIES

    def test_selection_covers_the_pool(self) -> None:
        rotator = IdentityRotator(rng=random.Random(99))
        seen = Counter(rotator.next().name for _ in range(500))
        assert set(seen) == {identity.name for identity in DEFAULT_IDENTITIES}

    def test_rotator_keeps_its_snapshot_when_pool_is_extended(self) -> None:
        pool = IdentityPool()
        rotator = IdentityRotator(pool, rng=random.Random(5))
        pool.extended([identity_from_user_agent("Extra/1.0 Safari/605.1.15")])

        assert rotator.pool is pool
        assert all(rotator.next() in DEFAULT_IDENTITIES for _ in range(50))
