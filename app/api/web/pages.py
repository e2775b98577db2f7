"""목록 및 브랜드 화면 라우터 — GET 페이지.

Listing and brand page router — GET endpoints rendering HTML.
AJAX callers of the brand detail route receive the brand as JSON instead.
"""

import re
from typing import Any

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from app.api.deps import AjaxDep, DbDep, json_success
from app.api.web.templates import brand_detail_page, brand_form_page, index_page
from app.schemas.brand import brand_to_response, dump
from app.services.brand_service import brand_service

router: APIRouter = APIRouter()

_PAGE_RE = re.compile(r"^[0-9]+$")

# 이보다 긴 페이지 번호는 마지막 페이지로 제한됨 (clamped to the last page)
_PAGE_DIGITS: int = 9


def parse_page(raw: str | None) -> int:
    """페이지 쿼리 값을 정수로 변환합니다 — 잘못된 값은 1.

    Parse the ``page`` query value; anything that is not a positive integer
    falls back to the first page. Oversized numbers are capped so the
    service clamps them to the last page.
    """
    text: str = (raw or "").strip()
    if not _PAGE_RE.match(text):
        return 1
    if len(text) > _PAGE_DIGITS:
        return 10**_PAGE_DIGITS
    return max(1, int(text))


def brand_form_values(brand: dict[str, Any]) -> dict[str, Any]:
    """브랜드 문서를 폼 값으로 변환 (Pre-fill values for the edit form)."""
    return {
        "name": brand.get("name", ""),
        "country_origin": brand.get("country_origin", ""),
        "founded_year": brand.get("founded_year", ""),
        "description": brand.get("description", ""),
    }


@router.get("/", response_class=HTMLResponse)
@router.get("/index", response_class=HTMLResponse)
def index(
    db: DbDep,
    q: str | None = None,
    category: str | None = None,
    page: str | None = None,
) -> HTMLResponse:
    """브랜드 목록 화면 — 검색, 카테고리 필터, 페이지네이션.

    Listing page: text search over brand and model names, exact category
    filter, clamped pagination.
    """
    q = (q or "").strip() or None
    category = (category or "").strip() or None
    result = brand_service.list_brands(db, q=q, category=category, page=parse_page(page))
    return index_page(
        result.model_dump(by_alias=True),
        brand_service.list_categories(db),
        q,
        category,
    )


@router.get("/new", response_class=HTMLResponse)
def new_brand_form() -> HTMLResponse:
    """새 브랜드 폼 (Empty new-brand form)."""
    return brand_form_page()


@router.get("/brand/{brand_id}")
@router.get("/detail/{brand_id}")
def brand_detail(brand_id: str, db: DbDep, ajax: AjaxDep) -> Response:
    """브랜드 상세 — AJAX 요청은 JSON.

    Brand detail with its models. AJAX callers get
    ``{"success": true, "message": "", "brand": {...}}``.

    Raises:
        NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
    """
    brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
    payload: dict[str, Any] = dump(brand_to_response(brand))
    if ajax:
        return json_success("", brand=payload)
    return brand_detail_page(payload)


@router.get("/brand/{brand_id}/edit", response_class=HTMLResponse)
def edit_brand_form(brand_id: str, db: DbDep) -> HTMLResponse:
    """브랜드 수정 폼 (Edit form pre-filled with the stored values)."""
    brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
    return brand_form_page(
        brand_form_values(brand),
        brand_id=str(brand["_id"]),
        image_filename=brand.get("imageFilename"),
    )
