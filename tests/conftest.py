"""테스트 인프라 — mongomock DB, 임시 업로드 폴더, httpx 클라이언트 픽스처.

Test infrastructure — In-memory MongoDB (mongomock), temporary uploads
folder, and httpx client fixtures. Each test gets a fresh database and an
empty uploads directory.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import mongomock
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pymongo.database import Database

from app.config import settings
from app.database import get_db
from app.main import app
from app.services.brand_service import brand_service
from app.services.model_service import model_service

AJAX: dict[str, str] = {"X-Requested-With": "XMLHttpRequest"}

# 1x1 PNG — smallest valid image payload for upload tests
PNG_BYTES: bytes = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def brand_form(**overrides: Any) -> dict[str, str]:
    """유효한 브랜드 폼 값 (Valid brand form values)."""
    form: dict[str, str] = {
        "name": "Nike",
        "country_origin": "Estados Unidos",
        "founded_year": "1964",
        "description": "Marca deportiva fundada en Oregón por Bill Bowerman.",
    }
    form.update(overrides)
    return form


def model_form(**overrides: Any) -> dict[str, str]:
    """유효한 모델 폼 값 (Valid model form values)."""
    form: dict[str, str] = {
        "name": "Air Max 90",
        "category": "Running",
        "description": "Clásico de running con cámara de aire visible.",
        "release_year": "1990",
        "price": "149.99",
        "average_rating": "4.5",
        "colorway": "Infrared",
        "size_range": "36-47",
    }
    form.update(overrides)
    return form


def image_file(field: str, name: str = "logo.png", content_type: str = "image/png") -> dict[str, Any]:
    """httpx ``files`` 인자 (Upload payload for one image field)."""
    return {field: (name, PNG_BYTES, content_type)}


@pytest.fixture
def uploads(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """테스트별 업로드 폴더 (Per-test uploads folder)."""
    folder: Path = tmp_path / "uploads"
    folder.mkdir()
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(folder))
    return folder


@pytest.fixture
def db(uploads: Path) -> Generator[Database, None, None]:
    """각 테스트에 격리된 메모리 DB를 제공합니다."""
    mongo = mongomock.MongoClient(tz_aware=True)
    yield mongo["test_sneakersdb"]
    mongo.close()


@pytest_asyncio.fixture
async def client(db: Database) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 의존성을 오버라이드합니다."""
    def _override_get_db() -> Generator[Database, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest.fixture
def brand(db: Database) -> dict[str, Any]:
    """테스트 브랜드를 생성합니다 (이미지 없음)."""
    return brand_service.create_brand(db, brand_form())


@pytest.fixture
def sneaker(db: Database, brand: dict[str, Any]) -> dict[str, Any]:
    """브랜드에 모델 하나를 추가합니다."""
    _, model = model_service.create_model(db, str(brand["_id"]), model_form())
    return model
