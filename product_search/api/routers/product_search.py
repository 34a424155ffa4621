"""
product_search/api/routers/product_search.py

Keyword product search scraping endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from product_search.api.dependencies import get_search_keyword
from product_search.schemas.product_search import ErrorResponse, ScrapeResponse
from product_search.scraping.types import ScrapeFailure
from product_search.services.product_search_service import (
    ProductSearchService,
    get_product_search_service,
)

router = APIRouter(prefix="/api", tags=["product-search"])


@router.get(
    "/scrape",
    response_model=ScrapeResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
def scrape_products(
    keyword: str = Depends(get_search_keyword),
    search_service: ProductSearchService = Depends(get_product_search_service),
) -> ScrapeResponse | JSONResponse:
    """
    Scrape the target site's search page for `keyword`.
    """

    outcome = search_service.scrape(keyword)
    if isinstance(outcome, ScrapeFailure):
        return JSONResponse(
            status_code=outcome.status_code,
            content=ErrorResponse.from_failure(outcome).model_dump(mode="json"),
        )
    return ScrapeResponse.from_result(outcome)
