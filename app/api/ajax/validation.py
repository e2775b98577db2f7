"""검증 API — 공유 규칙 테이블 및 이름 중복 확인.

Validation API — Publishes the shared rule table and answers the
advisory name-uniqueness probes the form client runs before submitting.
The authoritative checks still happen when the form is posted.
"""

from fastapi import APIRouter

from app.api.deps import DbDep
from app.schemas.brand import BrandNameCheck, ModelNameCheck, NameAvailability
from app.schemas.rules import RULE_SETS
from app.services.brand_service import brand_service
from app.services.model_service import model_service

router: APIRouter = APIRouter()


@router.get("/validation-rules")
def validation_rules() -> dict:
    """브랜드/모델 검증 규칙 (``{"brand": {...}, "model": {...}}``)."""
    return {entity: rules.model_dump() for entity, rules in RULE_SETS.items()}


@router.post("/check-brand-name", response_model=NameAvailability)
def check_brand_name(data: BrandNameCheck, db: DbDep) -> NameAvailability:
    """브랜드 이름 사용 가능 여부 (Exact, case-sensitive)."""
    return NameAvailability(
        available=brand_service.is_name_available(db, data.name, data.excludeId),
    )


@router.post("/check-model-name", response_model=NameAvailability)
def check_model_name(data: ModelNameCheck, db: DbDep) -> NameAvailability:
    """브랜드 내 모델 이름 사용 가능 여부 (Case-insensitive, per brand).

    Raises:
        NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
    """
    return NameAvailability(
        available=model_service.check_name(db, data.brandId, data.name, data.excludeModelId),
    )
