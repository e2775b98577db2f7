"""애플리케이션 환경 설정 모듈.

Application configuration module using pydantic-settings.
All settings can be overridden via environment variables or a .env file.
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

# .env 파일 절대 경로 — CWD와 무관하게 항상 프로젝트 루트의 .env를 참조
# Absolute path to .env file — ensures correct loading regardless of CWD
_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """애플리케이션 전역 설정 — 환경 변수 기반 구성.

    Global application settings loaded from environment variables.
    Uses pydantic-settings for automatic env var parsing and .env file support.

    Attributes:
        MONGO_URI: MongoDB 연결 문자열 (MongoDB connection string)
        MONGO_DB_NAME: 데이터베이스 이름 (Database name)
        UPLOADS_DIR: 업로드 이미지 저장 폴더 (Folder holding uploaded images)
        PAGE_SIZE: 목록 페이지당 브랜드 수 (Brands per listing page)
        MAX_UPLOAD_BYTES: 업로드 파일 최대 크기 (Upload size limit in bytes)
        CORS_ORIGINS: 허용된 CORS 출처 목록 (Allowed CORS origin URLs)
        APP_NAME: 애플리케이션 표시 이름 (Application display name)
        DEBUG: 디버그 모드 플래그 (Debug mode flag)
    """

    # 데이터베이스 — MongoDB 연결 (pymongo)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "sneakersdb"

    # 파일 저장소 — Local image storage
    UPLOADS_DIR: str = str(Path(__file__).resolve().parent.parent / "uploads")
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024  # 5MB

    # 목록 페이지네이션 — Listing pagination
    PAGE_SIZE: int = 9

    # 시드 데이터 폴더 — data.json + images/ (Demo data folder)
    SEED_DATA_DIR: str = str(Path(__file__).resolve().parent.parent / "data")

    # CORS 설정 — 프론트엔드 개발 서버 허용 (Frontend dev server origins)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # 앱 메타데이터 — Application metadata
    APP_NAME: str = "Sneakers Catalog"
    DEBUG: bool = True

    # Axiom 로깅 설정 — Axiom observability platform settings
    AXIOM_API_TOKEN: str = ""  # Axiom API 토큰 (API token from Axiom dashboard)
    AXIOM_DATASET: str = ""  # Axiom 데이터셋 이름 (Dataset name for API logs)

    model_config = {"env_file": _ENV_FILE, "env_file_encoding": "utf-8"}


# 전역 설정 싱글턴 인스턴스 — Global settings singleton instance
settings: Settings = Settings()
