"""
product_search/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import HTTPException, Query, status

from product_search.services.product_search_service import (
    INVALID_KEYWORD_ERROR,
    INVALID_KEYWORD_MESSAGE,
)


def get_search_keyword(
    keyword: str | None = Query(default=None, description="Search term to look up"),
) -> str:
    """
    Reject a missing or blank keyword before the scraping pipeline runs.
    """

    if keyword is None or not keyword.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": INVALID_KEYWORD_ERROR, "message": INVALID_KEYWORD_MESSAGE},
        )
    return keyword
