"""데이터베이스 클라이언트 설정 모듈.

Database client configuration module.
Sets up the pymongo client for the MongoDB document store and exposes
a FastAPI dependency yielding the catalog database.
"""

from collections.abc import Generator

from pymongo import MongoClient
from pymongo.database import Database

from app.config import settings

# 브랜드 컬렉션 이름 — Collection holding brand documents (models embedded)
BRANDS_COLLECTION: str = "brands"

# 지연 생성되는 클라이언트 — Lazily created client (pymongo pools connections itself)
_client: MongoClient | None = None


def get_client() -> MongoClient:
    """공유 MongoClient를 반환합니다.

    Return the process-wide MongoClient, creating it on first use.
    pymongo connects lazily, so this never blocks on an unreachable server.
    """
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGO_URI, tz_aware=True)
    return _client


def close_client() -> None:
    """클라이언트 연결을 닫습니다 (Close the shared client on shutdown)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_db() -> Generator[Database, None, None]:
    """카탈로그 데이터베이스를 제공하는 FastAPI 의존성.

    FastAPI dependency that yields the catalog database.
    Tests override this dependency with an in-memory client.

    Yields:
        Database: pymongo 데이터베이스 인스턴스 (pymongo database handle)
    """
    yield get_client()[settings.MONGO_DB_NAME]
