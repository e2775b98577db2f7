"""JSON 브랜드 API — 무한 스크롤 목록 및 단일 브랜드.

JSON brand API — Listing pages for infinite scroll and single brands.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.deps import DbDep, json_success
from app.api.web.pages import parse_page
from app.schemas.brand import brand_to_response, dump
from app.services.brand_service import brand_service

router: APIRouter = APIRouter()


@router.get("/brands")
def list_brands(
    db: DbDep,
    q: str | None = None,
    category: str | None = None,
    page: str | None = None,
) -> JSONResponse:
    """브랜드 목록 페이지를 JSON으로 반환합니다.

    Same filter and clamping as the HTML listing. Body:
    ``{success, message, items, page, totalPages, total, pageSize}``.
    """
    result = brand_service.list_brands(
        db,
        q=(q or "").strip() or None,
        category=(category or "").strip() or None,
        page=parse_page(page),
    )
    return json_success("", **result.model_dump(by_alias=True))


@router.get("/brands/{brand_id}")
def get_brand(brand_id: str, db: DbDep) -> JSONResponse:
    """브랜드 한 건을 JSON으로 반환합니다 (404 when unknown)."""
    brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
    return json_success("", brand=dump(brand_to_response(brand)))


@router.get("/categories")
def list_categories(db: DbDep) -> JSONResponse:
    return json_success("", categories=brand_service.list_categories(db))
