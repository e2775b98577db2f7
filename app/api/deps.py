"""FastAPI 의존성 및 응답 헬퍼 — AJAX/HTML 응답 규약.

FastAPI dependency and response helpers — the AJAX/HTML response convention.

Response Convention:
    1. ``X-Requested-With: XMLHttpRequest`` 헤더가 있거나 경로가 ``/api/``로
       시작하면 JSON 응답 (AJAX callers and the /api/ surface get JSON)
    2. JSON 응답은 항상 ``{"success": bool, "message": str, ...}`` 형태
       (Every JSON body carries success + message)
    3. 그 외 요청은 HTML 페이지 또는 303 리다이렉트 (Everything else gets HTML)
"""

from typing import Annotated, Any

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from pymongo.database import Database

from app.database import get_db

AJAX_HEADER: str = "X-Requested-With"
AJAX_VALUE: str = "XMLHttpRequest"

# 체크박스 참 값 — Values a form checkbox may post for "on"
_TRUTHY: set[str] = {"1", "true", "on", "yes"}


def wants_json(request: Request) -> bool:
    """JSON 응답이 필요한 요청인지 판단합니다.

    Return True for AJAX requests (``X-Requested-With: XMLHttpRequest``)
    and for anything under ``/api/``.
    """
    if request.headers.get(AJAX_HEADER, "").lower() == AJAX_VALUE.lower():
        return True
    return request.url.path.startswith("/api/")


def parse_flag(value: str | None) -> bool:
    """폼 체크박스 값을 bool로 변환합니다 (Interpret a posted checkbox)."""
    return (value or "").strip().lower() in _TRUTHY


def json_success(
    message: str,
    status_code: int = status.HTTP_200_OK,
    **payload: Any,
) -> JSONResponse:
    """성공 JSON 응답 (``{"success": true, "message": ..., **payload}``)."""
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "message": message, **payload},
    )


def json_error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """실패 JSON 응답 (``{"success": false, "message": ...}``)."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


# 공통 의존성 별칭 — Shared dependency aliases for route signatures
DbDep = Annotated[Database, Depends(get_db)]
AjaxDep = Annotated[bool, Depends(wants_json)]
