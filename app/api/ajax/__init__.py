"""JSON API 라우터 패키지 — ``/api`` 하위 엔드포인트 통합.

JSON API router package — Aggregates the endpoints mounted under ``/api``.

Included routers:
    - brands: 목록/단일 브랜드/카테고리 (Listing, single brand, categories)
    - validation: 규칙 테이블 및 이름 확인 (Rule table and name probes)
"""

from fastapi import APIRouter

from app.api.ajax.brands import router as brands_router
from app.api.ajax.validation import router as validation_router

api_router: APIRouter = APIRouter()

api_router.include_router(brands_router, tags=["API Brands"])
api_router.include_router(validation_router, tags=["API Validation"])
