"""스토리지 서비스 — 업로드 이미지 로컬 파일 저장.

Storage Service — Local file storage for uploaded brand and model images.
파일은 생성된 16진수 이름으로 UPLOADS_DIR에 저장되고, 문서에는 파일명만 기록됩니다.
Files are stored under a generated hex name; documents keep only the filename.
"""

import uuid
from pathlib import Path

from fastapi import UploadFile
from loguru import logger

from app.config import settings
from app.utils.exceptions import BadRequestError

# 파일명에 유지할 확장자 — Extensions kept so responses get the right media type
_IMAGE_SUFFIXES: set[str] = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".avif"}


class StorageService:
    """이미지 파일 저장/삭제 서비스."""

    @property
    def uploads_dir(self) -> Path:
        return Path(settings.UPLOADS_DIR)

    def path_for(self, filename: str) -> Path:
        """파일명에 해당하는 경로를 반환합니다.

        Resolve a stored filename to its path. Only bare names are accepted,
        so a document value can never point outside the uploads folder.
        """
        name: str = Path(filename).name
        if not name or name != filename:
            raise BadRequestError("Nombre de fichero no válido.")
        return self.uploads_dir / name

    def save_upload(self, upload: UploadFile | None) -> str | None:
        """업로드 파일을 저장하고 생성된 파일명을 반환합니다.

        Persist an uploaded image. Empty file fields (no file chosen in the
        form) yield ``None``.

        Raises:
            BadRequestError: 이미지가 아니거나 크기 제한 초과 시
                             (Not an image, or larger than MAX_UPLOAD_BYTES)
        """
        if upload is None or not upload.filename:
            return None

        data: bytes = upload.file.read()
        if not data:
            return None
        if upload.content_type and not upload.content_type.startswith("image/"):
            raise BadRequestError("El fichero debe ser una imagen.")
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError("La imagen supera el tamaño máximo permitido.")

        suffix: str = Path(upload.filename).suffix.lower()
        if suffix not in _IMAGE_SUFFIXES:
            suffix = ""
        filename: str = f"{uuid.uuid4().hex}{suffix}"
        path = self.uploads_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return filename

    def delete(self, filename: str | None) -> None:
        """파일을 삭제합니다 — 이미 없으면 무시.

        Best-effort delete; a file that is already gone is not an error.
        """
        if not filename:
            return
        try:
            self.path_for(filename).unlink(missing_ok=True)
        except (OSError, BadRequestError) as exc:
            logger.warning(f"Could not delete image {filename!r}: {exc}")

    def exists(self, filename: str | None) -> bool:
        if not filename:
            return False
        try:
            return self.path_for(filename).is_file()
        except BadRequestError:
            return False


storage_service: StorageService = StorageService()
