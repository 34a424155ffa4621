from __future__ import annotations

from datetime import datetime, timezone

from product_search.scraping.assembler import ResultAssembler
from product_search.scraping.types import FieldResult, NormalizedProduct

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _product(position: int, title: str, **overrides: FieldResult) -> NormalizedProduct:
    fields = {
        "rating": FieldResult.ok(4.5),
        "review_count": FieldResult.ok(10),
        "image_url": FieldResult.ok("https://img.example/a.jpg"),
        "price": FieldResult.ok("$9.99"),
        "original_price": FieldResult.missing("Original price not found (tried 2 locators)"),
        "availability": FieldResult.missing("Availability not found (tried 2 locators)"),
        "product_url": FieldResult.ok("https://www.amazon.com/dp/B0001"),
    }
    fields.update(overrides)
    return NormalizedProduct(position=position, title=title, **fields)


def _assembler() -> ResultAssembler:
    return ResultAssembler(clock=lambda: FIXED_NOW)


def test_ids_are_sequential_in_document_order() -> None:
    result = _assembler().assemble("mouse", [_product(7, "C"), _product(0, "A"), _product(3, "B")])

    assert [record.id for record in result.products] == [1, 2, 3]
    assert [record.title for record in result.products] == ["A", "B", "C"]


def test_all_records_share_batch_timestamp() -> None:
    result = _assembler().assemble("mouse", [_product(0, "A"), _product(1, "B")])

    assert result.timestamp == FIXED_NOW
    assert {record.timestamp for record in result.products} == {FIXED_NOW}


def test_empty_product_list_is_a_successful_result() -> None:
    result = _assembler().assemble("nothing", [])

    assert result.success is True
    assert result.products == ()
    assert result.total_products == 0


def test_optional_fields_are_not_reported_as_errors() -> None:
    (record,) = _assembler().assemble("mouse", [_product(0, "A")]).products

    assert record.errors == {}
    assert record.original_price is None
    assert record.availability is None


def test_failed_fields_become_error_entries() -> None:
    product = _product(
        0,
        "A",
        price=FieldResult.missing("Price not found (tried 6 locators)"),
        rating=FieldResult.missing("Rating 7 is outside the 0-5 range"),
        image_url=FieldResult.missing("Image not found (tried 5 locators)"),
        product_url=FieldResult.missing("Product link rejected: https://other.example/dp/X"),
    )

    (record,) = _assembler().assemble("mouse", [product]).products

    assert record.price is None
    assert record.rating is None
    assert record.image_url == ""
    assert record.product_url == ""
    assert record.errors == {
        "price": "Price not found (tried 6 locators)",
        "rating": "Rating 7 is outside the 0-5 range",
        "image_url": "Image not found (tried 5 locators)",
        "product_url": "Product link rejected: https://other.example/dp/X",
    }


def test_keyword_is_kept_verbatim() -> None:
    assert _assembler().assemble("  Wireless Mouse ", []).keyword == "  Wireless Mouse "
