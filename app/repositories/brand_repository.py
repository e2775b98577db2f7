"""브랜드 레포지토리 — 브랜드 CRUD 및 내장 모델 쿼리.

Brand Repository — CRUD and related queries for brand documents.
Models live inside each brand's ``models`` array; this repository
provides the lookups the services need to keep that array consistent.
"""

import re
from typing import Any

from bson import ObjectId
from pymongo.database import Database

from app.database import BRANDS_COLLECTION
from app.repositories.base import BaseRepository, to_object_id


class BrandRepository(BaseRepository):
    """브랜드 컬렉션에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the brands collection.
    There is no atomic single-model update: model changes are written
    back as a whole ``models`` array through ``replace_models``.
    """

    def __init__(self) -> None:
        super().__init__(BRANDS_COLLECTION)

    def build_filter(
        self,
        q: str | None = None,
        category: str | None = None,
    ) -> dict[str, Any]:
        """목록 검색 조건을 생성합니다.

        Build the listing filter: ``q`` matches brand name or any embedded
        model name (case-insensitive), ``category`` matches an embedded
        model category exactly.
        """
        clauses: list[dict[str, Any]] = []
        if q and q.strip():
            pattern: str = re.escape(q.strip())
            clauses.append({
                "$or": [
                    {"name": {"$regex": pattern, "$options": "i"}},
                    {"models.name": {"$regex": pattern, "$options": "i"}},
                ]
            })
        if category and category.strip():
            clauses.append({"models.category": category.strip()})

        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}

    def get_page(
        self,
        db: Database,
        q: str | None,
        category: str | None,
        page: int,
        page_size: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """검색 조건에 맞는 브랜드 한 페이지를 조회합니다.

        Retrieve one page of brands matching the filter.

        Args:
            db: 데이터베이스 핸들 (Database handle)
            q: 브랜드/모델 이름 검색어 (Text search on brand or model names)
            category: 모델 카테고리 (Exact embedded model category)
            page: 1부터 시작하는 페이지 번호 (1-based page number)
            page_size: 페이지 크기 (Page size)

        Returns:
            tuple[list[dict], int]: (브랜드 목록, 전체 개수) (Items, total)
        """
        skip: int = (page - 1) * page_size
        return self.find_paginated(
            db,
            self.build_filter(q, category),
            skip=skip,
            limit=page_size,
            sort=[("name", 1), ("_id", 1)],
        )

    def find_by_name(self, db: Database, name: str) -> dict[str, Any] | None:
        """이름이 정확히 일치하는 브랜드를 조회합니다.

        Exact, case-sensitive name match used for uniqueness checks.
        """
        return self.collection(db).find_one({"name": name})

    def list_categories(self, db: Database) -> list[str]:
        """내장 모델의 카테고리 목록을 반환합니다 (Distinct model categories)."""
        categories: set[str] = set()
        for brand in self.collection(db).find({}, {"models": 1}):
            for model in brand.get("models") or []:
                category = model.get("category")
                if category:
                    categories.add(category)
        return sorted(categories)

    def replace_models(
        self,
        db: Database,
        brand_id: Any,
        models: list[dict[str, Any]],
    ) -> dict[str, Any] | None:
        """모델 배열 전체를 덮어씁니다.

        Write the whole ``models`` array back. Concurrent writers racing on
        the same brand overwrite each other (last write wins).
        """
        return self.update(db, brand_id, {"models": models})

    def find_model_by_id(
        self,
        db: Database,
        model_id: Any,
    ) -> dict[str, Any] | None:
        """모델 ID로 모델과 소속 브랜드 ID를 조회합니다.

        Locate the brand whose ``models`` array holds the given model id.
        The native ObjectId is tried first; historical documents stored
        model ids as plain strings, so the raw value is tried next.

        Returns:
            dict | None: {"model": ..., "brand_id": ...} 또는 None
        """
        candidates: list[Any] = []
        oid: ObjectId | None = to_object_id(model_id)
        if oid is not None:
            candidates.append(oid)
        if isinstance(model_id, str):
            candidates.append(model_id)
        else:
            candidates.append(str(model_id))

        for candidate in candidates:
            brand = self.collection(db).find_one({"models._id": candidate})
            if brand is None:
                continue
            for model in brand.get("models") or []:
                if model.get("_id") == candidate:
                    return {"model": model, "brand_id": brand["_id"]}
        return None


def find_model_index(models: list[dict[str, Any]], model_id: Any) -> int:
    """배열에서 모델의 위치를 찾습니다.

    Return the index of the model with the given id, or -1. Ids are
    compared by string form so ObjectId and legacy string ids both match.
    """
    wanted: str = str(model_id)
    for index, model in enumerate(models):
        if str(model.get("_id")) == wanted:
            return index
    return -1


# 싱글턴 인스턴스 — Singleton instance
brand_repository: BrandRepository = BrandRepository()
