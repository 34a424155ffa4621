"""
tests/test_html_parsers.py

Container discovery, per-field fallback and URL handling of the product
field extractor. Markup is built from the shared card fixture.
"""

from __future__ import annotations

import pytest

from product_search.scraping.config.models import TargetSiteConfig
from product_search.scraping.parsing import ProductFieldExtractor, parse_document


@pytest.fixture()
def extractor() -> ProductFieldExtractor:
    return ProductFieldExtractor(target=TargetSiteConfig())


def _extract(extractor: ProductFieldExtractor, html: str):
    return extractor.extract(parse_document(html))


class TestContainerDiscovery:
    def test_no_containers_yields_empty_list(self, extractor: ProductFieldExtractor) -> None:
        html = "<html><head><title>Nothing</title></head><body><p>No results</p></body></html>"
        assert _extract(extractor, html) == []

    def test_first_matching_selector_is_used_exclusively(self, extractor: ProductFieldExtractor) -> None:
        html = (
            "<html><body>"
            '<div class="s-result-item"><h2>Sponsored banner</h2></div>'
            '<div data-component-type="s-search-result"><h2>Real product</h2></div>'
            "</body></html>"
        )

        products = _extract(extractor, html)

        assert [product.title for product in products] == ["Real product"]

    def test_later_selector_used_when_earlier_ones_miss(self, extractor: ProductFieldExtractor) -> None:
        html = '<div data-asin="B01"><h2>Only asin markup</h2></div>'
        assert [product.title for product in _extract(extractor, html)] == ["Only asin markup"]


class TestCandidateExtraction:
    def test_full_card(self, extractor: ProductFieldExtractor, search_page, product_card) -> None:
        html = search_page(product_card(original_price="$39.99", availability="Only 3 left in stock"))

        (product,) = _extract(extractor, html)

        assert product.position == 0
        assert product.title == "Wireless Mouse"
        assert product.image_url.value == "https://m.media-amazon.com/images/I/mouse.jpg"
        assert product.rating_text.value == "4.3 out of 5 stars"
        assert product.review_count_text.value == "(1,234)"
        assert product.price_text.value == "$29.99"
        assert product.original_price_text.value == "$39.99"
        assert product.availability.value == "Only 3 left in stock"
        assert product.product_url.value == "https://www.amazon.com/Logitech-Wireless-Mouse/dp/B0001/ref=sr_1_1"

    def test_card_without_title_is_dropped(self, extractor: ProductFieldExtractor, search_page, product_card) -> None:
        html = search_page(
            product_card(title="First", asin="A1"),
            product_card(title=None, asin="A2"),
            product_card(title="Third", asin="A3"),
        )

        products = _extract(extractor, html)

        assert [product.title for product in products] == ["First", "Third"]
        assert [product.position for product in products] == [0, 2]

    def test_missing_fields_carry_reasons(self, extractor: ProductFieldExtractor, search_page, product_card) -> None:
        html = search_page(product_card(price=None, rating=None, image=None))

        (product,) = _extract(extractor, html)

        assert not product.price_text.present
        assert product.price_text.reason.startswith("Price not found")
        assert product.rating_text.reason.startswith("Rating not found")
        assert product.image_url.reason.startswith("Image not found")
        assert not product.original_price_text.present
        assert not product.availability.present

    def test_off_site_link_is_rejected_with_reason(
        self, extractor: ProductFieldExtractor, search_page, product_card
    ) -> None:
        html = search_page(product_card(href="https://tracker.example.net/dp/B0001"))

        (product,) = _extract(extractor, html)

        assert not product.product_url.present
        assert product.product_url.reason == "Product link rejected: https://tracker.example.net/dp/B0001"

    def test_data_uri_placeholder_falls_back_to_lazy_source(self, extractor: ProductFieldExtractor) -> None:
        html = (
            '<div data-component-type="s-search-result"><h2>Lazy</h2>'
            '<img class="s-image" src="data:image/gif;base64,R0lGOD" data-src="https://img.example/lazy.jpg">'
            "</div>"
        )

        (product,) = _extract(extractor, html)

        assert product.image_url.value == "https://img.example/lazy.jpg"


class TestUrlHelpers:
    @pytest.mark.parametrize(
        ("href", "expected"),
        [
            ("/Some-Item/dp/B0002", "https://www.amazon.com/Some-Item/dp/B0002"),
            ("https://smile.amazon.com/x/dp/B0003", "https://smile.amazon.com/x/dp/B0003"),
            ("https://amazon.com/dp/B0004", "https://amazon.com/dp/B0004"),
        ],
    )
    def test_accepts_target_domain_product_links(
        self, extractor: ProductFieldExtractor, href: str, expected: str
    ) -> None:
        assert extractor.resolve_product_url(href) == expected

    @pytest.mark.parametrize(
        "href",
        [
            "",
            "#reviews",
            "javascript:void(0)",
            "/gp/help/customer",
            "https://notamazon.com/dp/B0001",
            "ftp://www.amazon.com/dp/B0001",
        ],
    )
    def test_rejects_other_links(self, extractor: ProductFieldExtractor, href: str) -> None:
        assert extractor.resolve_product_url(href) is None

    def test_protocol_relative_image_gets_https(self) -> None:
        assert ProductFieldExtractor.normalize_image_url("//cdn.example/a.jpg") == "https://cdn.example/a.jpg"

    def test_absolute_image_is_unchanged(self) -> None:
        assert ProductFieldExtractor.normalize_image_url("https://cdn.example/a.jpg") == "https://cdn.example/a.jpg"
