"""
Run a product search scrape from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging

from product_search.schemas.product_search import ErrorResponse, ScrapeResponse
from product_search.scraping.types import ScrapeFailure
from product_search.services.product_search_service import ProductSearchService


def main() -> int:
    parser = argparse.ArgumentParser(description="Scrape the product search page for a keyword.")
    parser.add_argument("--keyword", dest="keyword", required=True, help="Search term.")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        help="Logging level for pipeline events (default: WARNING).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = ProductSearchService()
    outcome = service.scrape(args.keyword)

    if isinstance(outcome, ScrapeFailure):
        payload = ErrorResponse.from_failure(outcome).model_dump(mode="json")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 1

    payload = ScrapeResponse.from_result(outcome).model_dump(mode="json", by_alias=True)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
