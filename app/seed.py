"""데모 데이터 시드 스크립트 — 브랜드 컬렉션 초기화.

Seed script — Resets the catalog to the demo data set.
Deletes every brand, inserts the brands from a JSON file and replaces the
uploads folder with the demo images.

Usage:
    python -m app.seed              # SEED_DATA_DIR/data.json
    python -m app.seed other.json   # file inside SEED_DATA_DIR, or any path

Data file:
    브랜드 문서 배열 — JSON array of brand documents. Embedded models may be
    listed under ``models`` (or the older ``sneakers`` key); each gets a fresh
    ObjectId unless it already carries an ``_id``.
"""

import json
import shutil
import sys
from pathlib import Path
from typing import Any

from bson import ObjectId
from loguru import logger
from pymongo.database import Database

from app.config import settings
from app.database import close_client, get_client
from app.repositories.base import to_object_id
from app.repositories.brand_repository import brand_repository


def prepare_brand(raw: dict[str, Any]) -> dict[str, Any]:
    """JSON 브랜드를 저장 가능한 문서로 변환합니다.

    Normalize one brand from the data file: models go under ``models`` and
    each embedded model gets an ObjectId.
    """
    brand: dict[str, Any] = dict(raw)
    models: list[dict[str, Any]] = brand.pop("sneakers", None) or brand.get("models") or []
    brand.pop("_id", None)
    brand.setdefault("imageFilename", None)

    prepared: list[dict[str, Any]] = []
    for model in models:
        model = dict(model)
        model["_id"] = to_object_id(model.get("_id")) or ObjectId()
        model.setdefault("imageFilename", None)
        prepared.append(model)
    brand["models"] = prepared
    return brand


def resolve_data_file(argument: str | None) -> Path:
    """데이터 파일 경로를 결정합니다 (Bare names are looked up in SEED_DATA_DIR)."""
    data_dir: Path = Path(settings.SEED_DATA_DIR)
    if not argument:
        return data_dir / "data.json"
    path: Path = Path(argument)
    if path.exists() or path.is_absolute():
        return path
    return data_dir / path


def reset_uploads(images_dir: Path, uploads_dir: Path) -> int:
    """업로드 폴더를 데모 이미지로 교체합니다.

    Returns:
        int: 복사된 파일 수 (Number of files copied)
    """
    shutil.rmtree(uploads_dir, ignore_errors=True)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    if not images_dir.is_dir():
        logger.warning(f"No demo images folder at {images_dir}")
        return 0
    shutil.copytree(images_dir, uploads_dir, dirs_exist_ok=True)
    return sum(1 for p in uploads_dir.rglob("*") if p.is_file())


def seed(db: Database, data_file: Path) -> int:
    """데이터베이스를 데모 데이터로 초기화합니다.

    Not idempotent in the additive sense: every run replaces the whole
    collection and the uploads folder.

    Args:
        db: 데이터베이스 핸들 (Database handle)
        data_file: 브랜드 JSON 파일 (JSON array of brands)

    Returns:
        int: 삽입된 브랜드 수 (Number of brands inserted)
    """
    brands: list[dict[str, Any]] = json.loads(data_file.read_text(encoding="utf-8"))

    removed: int = brand_repository.delete_all(db)
    for raw in brands:
        brand_repository.create(db, prepare_brand(raw))

    copied: int = reset_uploads(data_file.parent / "images", Path(settings.UPLOADS_DIR))
    logger.info(
        f"Demo data loaded: {len(brands)} brands from {data_file} "
        f"({removed} removed, {copied} images copied)"
    )
    return len(brands)


if __name__ == "__main__":
    try:
        seed(get_client()[settings.MONGO_DB_NAME], resolve_data_file(sys.argv[1] if len(sys.argv) > 1 else None))
    finally:
        close_client()
