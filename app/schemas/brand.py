"""브랜드/모델 스키마 — 요청 및 응답 모델.

Brand and model schemas — request and response models.
Response models keep the ``_id`` key the browser client reads, with
identifiers rendered as strings.
"""

from typing import Any

from pydantic import BaseModel, Field


class ModelResponse(BaseModel):
    """내장 모델 응답 (Embedded sneaker model)."""

    model_config = {"populate_by_name": True}

    id: str = Field(alias="_id")
    name: str
    category: str
    description: str
    release_year: int
    price: float
    average_rating: float = 0
    colorway: str = ""
    size_range: str = ""
    imageFilename: str | None = None


class BrandResponse(BaseModel):
    """브랜드 응답 — 내장 모델 포함 (Brand with embedded models)."""

    model_config = {"populate_by_name": True}

    id: str = Field(alias="_id")
    name: str
    country_origin: str
    founded_year: int
    description: str
    imageFilename: str | None = None
    models: list[ModelResponse] = Field(default_factory=list)


class BrandNameCheck(BaseModel):
    """브랜드 이름 사용 가능 여부 요청."""

    name: str = ""
    excludeId: str | None = None


class ModelNameCheck(BaseModel):
    """모델 이름 사용 가능 여부 요청 — 브랜드 범위."""

    name: str = ""
    brandId: str
    excludeModelId: str | None = None


class NameAvailability(BaseModel):
    available: bool


def model_to_response(model: dict[str, Any]) -> ModelResponse:
    """모델 문서를 응답 스키마로 변환합니다.

    Convert an embedded model document to its response schema.
    Legacy documents may lack optional fields; defaults fill them in.
    """
    return ModelResponse(
        _id=str(model["_id"]),
        name=model.get("name", ""),
        category=model.get("category", ""),
        description=model.get("description", ""),
        release_year=model.get("release_year") or 0,
        price=model.get("price") or 0,
        average_rating=model.get("average_rating") or 0,
        colorway=model.get("colorway") or "",
        size_range=model.get("size_range") or "",
        imageFilename=model.get("imageFilename"),
    )


def brand_to_response(brand: dict[str, Any]) -> BrandResponse:
    """브랜드 문서를 응답 스키마로 변환합니다.

    Convert a brand document (with embedded models) to its response schema.
    """
    return BrandResponse(
        _id=str(brand["_id"]),
        name=brand.get("name", ""),
        country_origin=brand.get("country_origin", ""),
        founded_year=brand.get("founded_year") or 0,
        description=brand.get("description", ""),
        imageFilename=brand.get("imageFilename"),
        models=[model_to_response(m) for m in brand.get("models") or []],
    )


def dump(schema: BaseModel) -> dict[str, Any]:
    """JSON 응답용 딕셔너리 — ``_id`` 별칭 유지 (Serialize by alias)."""
    return schema.model_dump(by_alias=True)
