"""이미지 라우터 — 저장된 브랜드/모델 이미지 전송.

Image router — Serves stored brand and model images from UPLOADS_DIR.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.api.deps import DbDep
from app.services.brand_service import brand_service
from app.services.model_service import model_service
from app.services.storage_service import storage_service
from app.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()

IMAGE_NOT_FOUND: str = "Imagen no encontrada."


def _file_response(filename: str | None) -> FileResponse:
    if not storage_service.exists(filename):
        raise NotFoundError(IMAGE_NOT_FOUND)
    return FileResponse(storage_service.path_for(filename))


@router.get("/brand/{brand_id}/image")
def brand_image(brand_id: str, db: DbDep) -> FileResponse:
    """브랜드 로고 이미지 (Brand logo; 404 when the brand has none)."""
    brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
    return _file_response(brand.get("imageFilename"))


@router.get("/brand.models/{model_id}/image")
def model_image(model_id: str, db: DbDep) -> FileResponse:
    """모델 이미지 — 모델 ID만으로 조회.

    Model image looked up by model identifier alone.
    """
    found: dict[str, Any] = model_service.find_model(db, model_id)
    return _file_response(found["model"].get("imageFilename"))
