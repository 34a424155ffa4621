"""
Detection of blocked or rate-limited responses.
"""

from __future__ import annotations

from product_search.scraping.types import BlockVerdict, PageStatus, RawPage

BLOCKING_STATUS_CODES = frozenset({429, 503})
RATE_LIMIT_REMAINING_HEADERS = ("x-ratelimit-remaining", "ratelimit-remaining")
BLOCK_INDICATORS = (
    "captcha",
    "robot",
    "blocked",
    "rate limit",
    "too many requests",
    "access denied",
    "unusual traffic",
    "security check",
)

_CLEAN = BlockVerdict(status=PageStatus.CLEAN)


class BlockDetector:
    """
    Decides whether the target refused the request rather than served content.

    Classification depends only on the page, so repeated calls agree.
    """

    def __init__(self, indicators: tuple[str, ...] = BLOCK_INDICATORS) -> None:
        self._indicators = tuple(indicator.lower() for indicator in indicators)

    def classify(self, page: RawPage) -> BlockVerdict:
        if page.status_code in BLOCKING_STATUS_CODES:
            return BlockVerdict(
                status=PageStatus.BLOCKED,
                reason=f"status {page.status_code}",
            )

        if page.header("retry-after") is not None:
            return BlockVerdict(
                status=PageStatus.BLOCKED,
                reason=f"retry-after header ({page.header('retry-after')})",
            )

        for header_name in RATE_LIMIT_REMAINING_HEADERS:
            remaining = page.header(header_name)
            if remaining is not None and remaining.strip() == "0":
                return BlockVerdict(
                    status=PageStatus.BLOCKED,
                    reason=f"{header_name} header is 0",
                )

        body = page.body.lower()
        for indicator in self._indicators:
            if indicator in body:
                return BlockVerdict(
                    status=PageStatus.BLOCKED,
                    reason=f"body contains '{indicator}'",
                )

        return _CLEAN
