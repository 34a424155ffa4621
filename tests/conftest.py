"""
Shared fixtures: fake HTTP session, recorded sleeps and search-page markup.

Nothing here touches the network or the real clock.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from product_search.scraping.config.models import (
    PacingSettings,
    ProductSearchSettings,
    TargetSiteConfig,
)
from product_search.scraping.identity import IdentityRotator
from product_search.scraping.pacing import PacingController


def _make_response(
    status_code: int = 200,
    body: str = "",
    headers: dict[str, str] | None = None,
    url: str = "https://www.amazon.com/s?k=test",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    response.url = url
    return response


class FakeSession:
    """
    Stand-in for ``requests.Session`` that replays scripted outcomes.

    Each outcome is a response or an exception to raise; the last one
    repeats once the script runs out.
    """

    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"url": url, **kwargs})
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


@pytest.fixture()
def make_response() -> Callable[..., requests.Response]:
    return _make_response


@pytest.fixture()
def fake_session() -> Callable[[list[Any]], FakeSession]:
    return FakeSession


@pytest.fixture()
def sleeps() -> list[float]:
    """Durations passed to the injected sleep function, in call order."""
    return []


@pytest.fixture()
def pacing(sleeps: list[float]) -> PacingController:
    return PacingController(
        settings=PacingSettings(),
        rng=random.Random(1234),
        sleep=sleeps.append,
    )


@pytest.fixture()
def rotator() -> IdentityRotator:
    return IdentityRotator(rng=random.Random(42))


@pytest.fixture()
def settings() -> ProductSearchSettings:
    return ProductSearchSettings(
        target=TargetSiteConfig(),
        pacing=PacingSettings(),
        timeout_seconds=10.0,
        max_retries=3,
        overall_timeout_seconds=60.0,
        price_locale="en-US",
    )


def _product_card(
    *,
    title: str | None = "Wireless Mouse",
    href: str | None = "/Logitech-Wireless-Mouse/dp/B0001/ref=sr_1_1",
    image: str | None = "//m.media-amazon.com/images/I/mouse.jpg",
    rating: str | None = "4.3 out of 5 stars",
    reviews: str | None = "(1,234)",
    price: str | None = "$29.99",
    original_price: str | None = None,
    availability: str | None = None,
    asin: str = "B0001",
) -> str:
    parts = [f'<div data-component-type="s-search-result" data-asin="{asin}" class="s-result-item">']
    if title is not None:
        link_open = f'<a class="a-link-normal" href="{href}">' if href is not None else "<a>"
        parts.append(f"<h2>{link_open}<span>{title}</span></a></h2>")
    elif href is not None:
        parts.append(f'<a class="a-link-normal" href="{href}">view</a>')
    if image is not None:
        parts.append(f'<img class="s-image" src="{image}" alt="">')
    if rating is not None:
        parts.append(f'<i class="a-icon a-icon-star-small"><span class="a-icon-alt">{rating}</span></i>')
    if reviews is not None:
        parts.append(
            f'<a href="{href or "#"}#customerReviews">'
            f'<span class="a-size-base s-underline-text">{reviews}</span></a>'
        )
    if price is not None:
        parts.append(
            f'<span class="a-price"><span class="a-offscreen">{price}</span>'
            f'<span aria-hidden="true"><span class="a-price-whole">0.</span></span></span>'
        )
    if original_price is not None:
        parts.append(
            f'<span class="a-price a-text-price"><span class="a-offscreen">{original_price}</span></span>'
        )
    if availability is not None:
        parts.append(f'<span class="a-color-success">{availability}</span>')
    parts.append("</div>")
    return "".join(parts)


def _search_page(*cards: str, title: str = "Amazon.com : wireless mouse") -> str:
    return (
        f"<html><head><title>{title}</title></head><body>"
        f'<div class="s-main-slot">{"".join(cards)}</div>'
        "</body></html>"
    )


@pytest.fixture()
def product_card() -> Callable[..., str]:
    return _product_card


@pytest.fixture()
def search_page() -> Callable[..., str]:
    return _search_page
