"""웹 라우터 패키지 — HTML 화면 및 폼 작업 통합.

Web router package — Aggregates the HTML pages and form actions.

Included routers:
    - pages: 목록, 브랜드 상세/폼 (Listing, brand detail and forms)
    - brands: 브랜드 생성/수정/삭제 (Brand create, edit, delete)
    - models: 모델 화면 및 작업 (Model pages and actions)
    - images: 이미지 파일 (Stored image files)
"""

from fastapi import APIRouter

from app.api.web.pages import router as pages_router
from app.api.web.brands import router as brands_router
from app.api.web.models import router as models_router
from app.api.web.images import router as images_router

web_router: APIRouter = APIRouter()

web_router.include_router(pages_router, tags=["Pages"])
web_router.include_router(brands_router, tags=["Brands"])
web_router.include_router(models_router, tags=["Models"])
web_router.include_router(images_router, tags=["Images"])
