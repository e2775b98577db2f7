"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for document repositories.
Provides generic insert, read, update and delete operations over a
single MongoDB collection.

Usage:
    class BrandRepository(BaseRepository):
        def __init__(self) -> None:
            super().__init__(BRANDS_COLLECTION)
"""

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database


def to_object_id(value: Any) -> ObjectId | None:
    """문자열 ID를 ObjectId로 변환합니다.

    Convert an identifier to an ObjectId.

    Args:
        value: ObjectId 또는 24자리 16진수 문자열 (ObjectId or 24-hex string)

    Returns:
        ObjectId | None: 변환 결과, 유효하지 않으면 None (None when not a valid id)
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class BaseRepository:
    """제네릭 문서 레포지토리.

    Generic document repository providing common collection operations.
    Identifiers are accepted as strings or ObjectIds; strings that are not
    valid ObjectIds simply do not resolve.

    Attributes:
        collection_name: 이 레포지토리가 관리할 컬렉션 이름
                         (Name of the collection this repository manages)
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name: str = collection_name

    def collection(self, db: Database) -> Collection:
        return db[self.collection_name]

    def get_by_id(self, db: Database, record_id: Any) -> dict[str, Any] | None:
        """ID로 단일 문서를 조회합니다.

        Retrieve a single document by its identifier.

        Args:
            db: 데이터베이스 핸들 (Database handle)
            record_id: 조회할 문서의 ID (Identifier of the document)

        Returns:
            dict | None: 조회된 문서 또는 None (Found document or None)
        """
        oid = to_object_id(record_id)
        if oid is None:
            return None
        return self.collection(db).find_one({"_id": oid})

    def find_paginated(
        self,
        db: Database,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 20,
        sort: list[tuple[str, int]] | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """페이지네이션이 적용된 문서 목록을 조회합니다.

        Retrieve a page of documents and the total count for the filter.

        Args:
            db: 데이터베이스 핸들 (Database handle)
            filters: MongoDB 검색 조건 (MongoDB filter document)
            skip: 건너뛸 문서 수 (Number of documents to skip)
            limit: 최대 반환 문서 수 (Maximum documents to return)
            sort: 정렬 기준 (Sort specification)

        Returns:
            tuple[list[dict], int]: (문서 목록, 전체 개수)
                                    (Page of documents, total count)
        """
        collection = self.collection(db)
        total: int = collection.count_documents(filters)

        cursor = collection.find(filters)
        if sort:
            cursor = cursor.sort(sort)
        items: list[dict[str, Any]] = list(cursor.skip(skip).limit(limit))
        return items, total

    def count(self, db: Database, filters: dict[str, Any] | None = None) -> int:
        return self.collection(db).count_documents(filters or {})

    def create(self, db: Database, obj_data: dict[str, Any]) -> ObjectId:
        """새 문서를 생성합니다.

        Insert a new document and return its generated identifier.
        """
        result = self.collection(db).insert_one(obj_data)
        return result.inserted_id

    def update(
        self,
        db: Database,
        record_id: Any,
        update_data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """기존 문서의 필드를 병합 업데이트합니다.

        Merge the given fields into an existing document ($set).

        Returns:
            dict | None: 업데이트된 문서 또는 None (Updated document or None)
        """
        oid = to_object_id(record_id)
        if oid is None:
            return None
        return self.collection(db).find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, db: Database, record_id: Any) -> dict[str, Any] | None:
        """문서를 삭제하고 삭제된 문서를 반환합니다.

        Delete a document, returning it for cascading cleanup by the caller.

        Returns:
            dict | None: 삭제된 문서 또는 None (Deleted document or None when not found)
        """
        oid = to_object_id(record_id)
        if oid is None:
            return None
        return self.collection(db).find_one_and_delete({"_id": oid})

    def delete_all(self, db: Database) -> int:
        """컬렉션의 모든 문서를 삭제합니다 (Seed reset only)."""
        return self.collection(db).delete_many({}).deleted_count
