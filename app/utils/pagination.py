"""페이지네이션 유틸리티 모듈.

Pagination utility module.
Provides page clamping and a Page response model for consistent
pagination across the HTML listing and the JSON listing API.
"""

import math
from typing import Any

from pydantic import BaseModel, Field


class Page(BaseModel):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses. Field names follow the
    JSON the infinite-scroll client reads (``items``, ``page``, ``totalPages``).

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 필터에 일치하는 전체 항목 수 (Total count matching the filter)
        page: 현재 페이지 번호 (Current page number, 1-based)
        page_size: 페이지당 항목 수 (Items per page)
        total_pages: 전체 페이지 수 (Total number of pages, at least 1)
    """

    model_config = {"populate_by_name": True}

    items: list[Any]
    total: int
    page: int
    page_size: int = Field(alias="pageSize")
    total_pages: int = Field(alias="totalPages")


def total_pages(total: int, page_size: int) -> int:
    """전체 페이지 수 — 항목이 없어도 최소 1 (At least one page, even when empty)."""
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int | None, total: int, page_size: int) -> int:
    """요청 페이지를 [1, total_pages] 범위로 제한합니다.

    Clamp a requested page number into ``[1, total_pages]``.

    Args:
        page: 요청 페이지 번호 (Requested page, may be None or out of range)
        total: 전체 항목 수 (Total matching items)
        page_size: 페이지당 항목 수 (Items per page)

    Returns:
        int: 유효한 페이지 번호 (Valid 1-based page number)
    """
    if page is None or page < 1:
        return 1
    return min(page, total_pages(total, page_size))
