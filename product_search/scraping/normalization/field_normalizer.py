"""
Normalization of raw field text into typed product values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from product_search.scraping.types import ExtractedProduct, FieldResult, NormalizedProduct

RATING_MIN = 0.0
RATING_MAX = 5.0

_NUMBER_TOKEN = re.compile(r"\d[\d.,]*")
_RATING_TOKEN = re.compile(r"\d+(?:[.,]\d+)?")
_DIGIT_GROUP = re.compile(r"(-\s*)?(\d{1,3}(?:[,.]\d{3})+|\d+)")


@dataclass(frozen=True)
class CurrencyFormat:
    """
    Presentation rules for a localized currency string.
    """

    symbol: str
    decimal_separator: str
    thousands_separator: str
    symbol_separator: str = ""

    def format(self, amount: Decimal) -> str:
        quantized = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        whole, _, cents = f"{quantized:,.2f}".partition(".")
        whole = whole.replace(",", self.thousands_separator)
        return f"{self.symbol}{self.symbol_separator}{whole}{self.decimal_separator}{cents}"


CURRENCY_FORMATS: dict[str, CurrencyFormat] = {
    "pt-BR": CurrencyFormat(
        symbol="R$",
        decimal_separator=",",
        thousands_separator=".",
        symbol_separator="\u00a0",
    ),
    "en-US": CurrencyFormat(symbol="$", decimal_separator=".", thousands_separator=","),
}


def parse_price(text: str) -> Decimal | None:
    """
    Parse the first numeric token of a price string.

    When both separators appear, the last one is the decimal separator. A
    lone separator is decimal only if it appears exactly once.
    """

    match = _NUMBER_TOKEN.search(text)
    if match is None:
        return None

    token = match.group(0).rstrip(".,")
    has_dot = "." in token
    has_comma = "," in token
    if has_dot and has_comma:
        decimal_sep = "." if token.rfind(".") > token.rfind(",") else ","
        thousands_sep = "," if decimal_sep == "." else "."
        token = token.replace(thousands_sep, "").replace(decimal_sep, ".")
    elif has_comma:
        token = token.replace(",", ".") if token.count(",") == 1 else token.replace(",", "")
    elif has_dot and token.count(".") > 1:
        token = token.replace(".", "")

    try:
        return Decimal(token)
    except InvalidOperation:
        return None


def parse_rating(text: str) -> float | None:
    match = _RATING_TOKEN.search(text)
    if match is None:
        return None
    return float(match.group(0).replace(",", "."))


def parse_review_count(text: str) -> int | None:
    """
    Parse the first digit group as an integer; negative counts yield ``None``.
    """

    match = _DIGIT_GROUP.search(text)
    if match is None or match.group(1):
        return None
    try:
        return int(re.sub(r"[,.]", "", match.group(2)))
    except ValueError:
        # int() refuses digit strings past sys.get_int_max_str_digits()
        return None


class FieldNormalizer:
    """
    Converts raw extracted text into typed values, recording failures as reasons.
    """

    def __init__(self, *, locale: str = "pt-BR") -> None:
        try:
            self.currency = CURRENCY_FORMATS[locale]
        except KeyError as exc:
            allowed = ", ".join(sorted(CURRENCY_FORMATS))
            raise ValueError(f"Unsupported price locale '{locale}'. Allowed: {allowed}.") from exc
        self.locale = locale

    def normalize(self, product: ExtractedProduct) -> NormalizedProduct:
        return NormalizedProduct(
            position=product.position,
            title=product.title,
            rating=self.normalize_rating(product.rating_text),
            review_count=self.normalize_review_count(product.review_count_text),
            image_url=product.image_url,
            price=self.normalize_price(product.price_text, label="Price"),
            original_price=self.normalize_price(product.original_price_text, label="Original price"),
            availability=product.availability,
            product_url=product.product_url,
        )

    def normalize_price(self, raw: FieldResult[str], *, label: str = "Price") -> FieldResult[str]:
        if not raw.present:
            return FieldResult.missing(raw.reason)
        amount = parse_price(raw.value)
        if amount is None:
            return FieldResult.missing(f"{label} could not be parsed from '{raw.value}'")
        try:
            formatted = self.currency.format(amount)
        except InvalidOperation:
            # more digits than the decimal context can quantize to cents
            return FieldResult.missing(f"{label} could not be parsed from '{raw.value}'")
        return FieldResult.ok(formatted)

    def normalize_rating(self, raw: FieldResult[str]) -> FieldResult[float]:
        if not raw.present:
            return FieldResult.missing(raw.reason)
        rating = parse_rating(raw.value)
        if rating is None:
            return FieldResult.missing(f"Rating could not be parsed from '{raw.value}'")
        if not RATING_MIN <= rating <= RATING_MAX:
            return FieldResult.missing(
                f"Rating {rating:g} is outside the {RATING_MIN:g}-{RATING_MAX:g} range"
            )
        return FieldResult.ok(rating)

    def normalize_review_count(self, raw: FieldResult[str]) -> FieldResult[int]:
        if not raw.present:
            return FieldResult.missing(raw.reason)
        count = parse_review_count(raw.value)
        if count is None:
            return FieldResult.missing(f"Review count could not be parsed from '{raw.value}'")
        return FieldResult.ok(count)
