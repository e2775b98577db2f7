"""브랜드 서비스 — 브랜드 CRUD 비즈니스 로직.

Brand Service — Business logic for brand CRUD operations.
Handles validation, global name uniqueness, listing with pagination,
and the brand image lifecycle.
"""

from typing import Any

from bson import ObjectId
from fastapi import UploadFile
from loguru import logger
from pymongo.database import Database

from app.config import settings
from app.repositories.brand_repository import brand_repository
from app.schemas.brand import brand_to_response, dump
from app.schemas.rules import validate_brand
from app.services.storage_service import storage_service
from app.utils.exceptions import NotFoundError, ValidationFailedError
from app.utils.pagination import Page, clamp_page, total_pages

BRAND_NOT_FOUND: str = "Marca no encontrada."
DUPLICATE_BRAND: str = "Ya existe una marca con ese nombre."


class BrandService:
    """브랜드 관련 비즈니스 로직을 처리하는 서비스.

    Service handling brand business logic.
    Server-side validation here is authoritative: on any violation nothing
    is written and the image uploaded with the request is removed.
    """

    def list_brands(
        self,
        db: Database,
        q: str | None = None,
        category: str | None = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> Page:
        """검색 조건에 맞는 브랜드 목록을 페이지 단위로 조회합니다.

        List brands matching the filter, one page at a time. The page number
        is clamped to ``[1, total_pages]``.

        Args:
            db: 데이터베이스 핸들 (Database handle)
            q: 브랜드/모델 이름 검색어 (Case-insensitive text search)
            category: 모델 카테고리 (Exact embedded model category)
            page: 요청 페이지 (Requested 1-based page)
            page_size: 페이지 크기, 기본값은 설정값 (Defaults to PAGE_SIZE)

        Returns:
            Page: 페이지 결과 (Page of brand responses)
        """
        size: int = page_size or settings.PAGE_SIZE
        total: int = brand_repository.count(db, brand_repository.build_filter(q, category))
        current: int = clamp_page(page, total, size)

        items, total = brand_repository.get_page(db, q, category, current, size)
        return Page(
            items=[dump(brand_to_response(b)) for b in items],
            total=total,
            page=current,
            page_size=size,
            total_pages=total_pages(total, size),
        )

    def list_categories(self, db: Database) -> list[str]:
        return brand_repository.list_categories(db)

    def get_brand(self, db: Database, brand_id: str) -> dict[str, Any]:
        """브랜드 문서를 조회합니다.

        Raises:
            NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
        """
        brand: dict[str, Any] | None = brand_repository.get_by_id(db, brand_id)
        if brand is None:
            raise NotFoundError(BRAND_NOT_FOUND)
        return brand

    def is_name_available(
        self,
        db: Database,
        name: str,
        exclude_id: str | ObjectId | None = None,
    ) -> bool:
        """브랜드 이름 사용 가능 여부를 확인합니다.

        Exact, case-sensitive check: "Nike" and "NIKE" are different names.
        ``exclude_id`` lets an edit keep its own name.
        """
        name = (name or "").strip()
        if not name:
            return True
        existing: dict[str, Any] | None = brand_repository.find_by_name(db, name)
        if existing is None:
            return True
        return exclude_id is not None and str(existing["_id"]) == str(exclude_id)

    def _validate(
        self,
        db: Database,
        form: dict[str, Any],
        exclude_id: str | None = None,
    ) -> dict[str, Any]:
        cleaned, errors = validate_brand(form)
        name: str | None = cleaned.get("name")
        if name and not self.is_name_available(db, name, exclude_id):
            errors.append(DUPLICATE_BRAND)
        if errors:
            raise ValidationFailedError(errors)
        return cleaned

    def create_brand(
        self,
        db: Database,
        form: dict[str, Any],
        image: UploadFile | None = None,
    ) -> dict[str, Any]:
        """새 브랜드를 생성합니다.

        Create a new brand with an empty ``models`` array.

        Args:
            db: 데이터베이스 핸들 (Database handle)
            form: 제출된 폼 값 (Submitted form values)
            image: 선택적 로고 이미지 (Optional logo upload)

        Returns:
            dict: 생성된 브랜드 문서 (Created brand document)

        Raises:
            ValidationFailedError: 규칙 위반 또는 이름 중복 시
                                   (Rule violation or duplicate name)
        """
        filename: str | None = storage_service.save_upload(image)
        try:
            cleaned = self._validate(db, form)
        except ValidationFailedError:
            storage_service.delete(filename)
            raise

        brand: dict[str, Any] = {
            "name": cleaned["name"],
            "country_origin": cleaned["country_origin"],
            "founded_year": cleaned["founded_year"],
            "description": cleaned["description"],
            "imageFilename": filename,
            "models": [],
        }
        brand["_id"] = brand_repository.create(db, brand)
        logger.info(f"Brand created: {brand['name']} ({brand['_id']})")
        return brand

    def update_brand(
        self,
        db: Database,
        brand_id: str,
        form: dict[str, Any],
        image: UploadFile | None = None,
        remove_image: bool = False,
    ) -> dict[str, Any]:
        """브랜드 정보를 수정합니다.

        Replace the brand's scalar fields; embedded models are untouched.
        Image handling: a new upload replaces the old file, ``remove_image``
        clears it, otherwise the current image is kept. The new filename is
        persisted before the old file is deleted.

        Raises:
            NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
            ValidationFailedError: 규칙 위반 또는 이름 중복 시
        """
        filename: str | None = storage_service.save_upload(image)
        try:
            brand: dict[str, Any] = self.get_brand(db, brand_id)
            cleaned = self._validate(db, form, exclude_id=brand_id)
        except (NotFoundError, ValidationFailedError):
            storage_service.delete(filename)
            raise

        old_filename: str | None = brand.get("imageFilename")
        update_data: dict[str, Any] = {
            "name": cleaned["name"],
            "country_origin": cleaned["country_origin"],
            "founded_year": cleaned["founded_year"],
            "description": cleaned["description"],
        }
        if filename:
            update_data["imageFilename"] = filename
        elif remove_image:
            update_data["imageFilename"] = None

        updated: dict[str, Any] | None = brand_repository.update(db, brand_id, update_data)
        if updated is None:
            # 동시 삭제 — Deleted concurrently between read and write
            storage_service.delete(filename)
            raise NotFoundError(BRAND_NOT_FOUND)

        if "imageFilename" in update_data and old_filename != update_data["imageFilename"]:
            storage_service.delete(old_filename)
        return updated

    def delete_brand(self, db: Database, brand_id: str) -> dict[str, Any]:
        """브랜드를 삭제합니다.

        Delete a brand, its logo file and the image files of its embedded models.

        Raises:
            NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
        """
        deleted: dict[str, Any] | None = brand_repository.delete(db, brand_id)
        if deleted is None:
            raise NotFoundError(BRAND_NOT_FOUND)

        storage_service.delete(deleted.get("imageFilename"))
        for model in deleted.get("models") or []:
            storage_service.delete(model.get("imageFilename"))
        logger.info(f"Brand deleted: {deleted.get('name')} ({deleted['_id']})")
        return deleted


# 싱글턴 인스턴스 — Singleton instance
brand_service: BrandService = BrandService()
