"""모델 서비스 — 브랜드에 내장된 스니커즈 모델 CRUD.

Model Service — CRUD for sneaker models embedded in a brand document.
Every mutation is a read-modify-write of the parent's ``models`` array:
fetch the brand, change the list in memory, write the whole list back.
Two concurrent writers on the same brand can overwrite each other.
"""

from typing import Any

from bson import ObjectId
from fastapi import UploadFile
from loguru import logger
from pymongo.database import Database

from app.repositories.brand_repository import brand_repository, find_model_index
from app.schemas.rules import validate_model
from app.services.brand_service import BRAND_NOT_FOUND, brand_service
from app.services.storage_service import storage_service
from app.utils.exceptions import NotFoundError, ValidationFailedError

MODEL_NOT_FOUND: str = "Modelo no encontrado."
DUPLICATE_MODEL: str = "Ya existe un modelo con ese nombre en esta marca."


class ModelService:
    """내장 모델 관련 비즈니스 로직을 처리하는 서비스.

    Service handling embedded model business logic.
    Model names are unique within their brand, compared case-insensitively.
    """

    def get_model(
        self,
        db: Database,
        brand_id: str,
        model_id: str,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """브랜드와 모델을 함께 조회합니다.

        Returns:
            tuple[dict, dict]: (브랜드 문서, 모델 문서) (Brand, model)

        Raises:
            NotFoundError: 브랜드 또는 모델을 찾을 수 없을 때
        """
        brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
        models: list[dict[str, Any]] = brand.get("models") or []
        index: int = find_model_index(models, model_id)
        if index < 0:
            raise NotFoundError(MODEL_NOT_FOUND)
        return brand, models[index]

    def find_model(self, db: Database, model_id: str) -> dict[str, Any]:
        """브랜드 ID 없이 모델을 조회합니다.

        Locate a model by its identifier alone (image route).

        Returns:
            dict: {"model": ..., "brand_id": ...}
        """
        found: dict[str, Any] | None = brand_repository.find_model_by_id(db, model_id)
        if found is None:
            raise NotFoundError(MODEL_NOT_FOUND)
        return found

    def is_name_available(
        self,
        models: list[dict[str, Any]],
        name: str,
        exclude_model_id: Any = None,
    ) -> bool:
        """브랜드 내 모델 이름 사용 가능 여부 (대소문자 무시).

        Case-insensitive uniqueness within one brand's models.
        """
        wanted: str = (name or "").strip().casefold()
        if not wanted:
            return True
        for model in models:
            if exclude_model_id is not None and str(model.get("_id")) == str(exclude_model_id):
                continue
            if (model.get("name") or "").strip().casefold() == wanted:
                return False
        return True

    def check_name(
        self,
        db: Database,
        brand_id: str,
        name: str,
        exclude_model_id: str | None = None,
    ) -> bool:
        brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
        return self.is_name_available(brand.get("models") or [], name, exclude_model_id)

    def _validate(
        self,
        models: list[dict[str, Any]],
        form: dict[str, Any],
        exclude_model_id: Any = None,
    ) -> dict[str, Any]:
        cleaned, errors = validate_model(form)
        name: str | None = cleaned.get("name")
        if name and not self.is_name_available(models, name, exclude_model_id):
            errors.append(DUPLICATE_MODEL)
        if errors:
            raise ValidationFailedError(errors)
        return cleaned

    def create_model(
        self,
        db: Database,
        brand_id: str,
        form: dict[str, Any],
        image: UploadFile | None = None,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """브랜드에 새 모델을 추가합니다.

        Validate, check uniqueness within the brand, assign a new ObjectId,
        append and write the whole array back.

        Returns:
            tuple[dict, dict]: (브랜드 문서, 생성된 모델) (Brand, created model)

        Raises:
            NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
            ValidationFailedError: 규칙 위반 또는 이름 중복 시
        """
        filename: str | None = storage_service.save_upload(image)
        try:
            brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
            models: list[dict[str, Any]] = list(brand.get("models") or [])
            cleaned = self._validate(models, form)
        except (NotFoundError, ValidationFailedError):
            storage_service.delete(filename)
            raise

        model: dict[str, Any] = {"_id": ObjectId(), **cleaned, "imageFilename": filename}
        models.append(model)

        updated: dict[str, Any] | None = brand_repository.replace_models(db, brand["_id"], models)
        if updated is None:
            storage_service.delete(filename)
            raise NotFoundError(BRAND_NOT_FOUND)
        logger.info(f"Model created: {model['name']} ({model['_id']}) in brand {brand['_id']}")
        return updated, model

    def update_model(
        self,
        db: Database,
        brand_id: str,
        model_id: str,
        form: dict[str, Any],
        image: UploadFile | None = None,
        remove_image: bool = False,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """모델 정보를 수정합니다.

        Replace the model's fields in place, keeping its identifier.
        Image handling: a new upload replaces the old file, ``remove_image``
        clears it, otherwise ``imageFilename`` is left unchanged.

        Returns:
            tuple[dict, dict]: (브랜드 문서, 수정된 모델) (Brand, updated model)

        Raises:
            NotFoundError: 브랜드 또는 모델을 찾을 수 없을 때
            ValidationFailedError: 규칙 위반 또는 이름 중복 시
        """
        filename: str | None = storage_service.save_upload(image)
        try:
            brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
            models: list[dict[str, Any]] = list(brand.get("models") or [])
            index: int = find_model_index(models, model_id)
            if index < 0:
                raise NotFoundError(MODEL_NOT_FOUND)
            current: dict[str, Any] = models[index]
            cleaned = self._validate(models, form, exclude_model_id=current["_id"])
        except (NotFoundError, ValidationFailedError):
            storage_service.delete(filename)
            raise

        old_filename: str | None = current.get("imageFilename")
        new_filename: str | None = old_filename
        if filename:
            new_filename = filename
        elif remove_image:
            new_filename = None

        model: dict[str, Any] = {"_id": current["_id"], **cleaned, "imageFilename": new_filename}
        models[index] = model

        updated: dict[str, Any] | None = brand_repository.replace_models(db, brand["_id"], models)
        if updated is None:
            storage_service.delete(filename)
            raise NotFoundError(BRAND_NOT_FOUND)

        if old_filename != new_filename:
            storage_service.delete(old_filename)
        return updated, model

    def delete_model(
        self,
        db: Database,
        brand_id: str,
        model_id: str,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """모델을 삭제합니다.

        Remove the model from the array by identifier, write the array back
        and best-effort delete its image file.

        Returns:
            tuple[dict, dict]: (브랜드 문서, 삭제된 모델) (Brand, removed model)

        Raises:
            NotFoundError: 브랜드 또는 모델을 찾을 수 없을 때
        """
        brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
        models: list[dict[str, Any]] = list(brand.get("models") or [])
        index: int = find_model_index(models, model_id)
        if index < 0:
            raise NotFoundError(MODEL_NOT_FOUND)

        removed: dict[str, Any] = models.pop(index)
        updated: dict[str, Any] | None = brand_repository.replace_models(db, brand["_id"], models)
        if updated is None:
            raise NotFoundError(BRAND_NOT_FOUND)

        storage_service.delete(removed.get("imageFilename"))
        logger.info(f"Model deleted: {removed.get('name')} ({removed['_id']}) from brand {brand['_id']}")
        return updated, removed


# 싱글턴 인스턴스 — Singleton instance
model_service: ModelService = ModelService()
