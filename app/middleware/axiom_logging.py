"""요청 로깅 미들웨어 — loguru 로컬 로그 + Axiom 전송.

Request logging middleware.
Every request is logged locally through loguru; when an Axiom token and
dataset are configured the same structured event is shipped to Axiom.
Logs: method, path, params, request body, status code, duration, error reason.
Multipart bodies (image uploads) are logged as their field names only.
"""

import json
import re
import time
from typing import Any
from urllib.parse import parse_qsl

from axiom_py import Client as AxiomClient
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# multipart 필드 이름 — Part names inside a multipart body
_PART_NAME = re.compile(rb'Content-Disposition:[^\r\n]*?\bname="([^"]*)"', re.IGNORECASE)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return _truncate(data)


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


def summarize_body(content_type: str, body: bytes) -> Any:
    """요청 본문을 로그용으로 요약합니다.

    Summarize a request body for logging according to its content type.

    Args:
        content_type: 요청 Content-Type 헤더 (Request Content-Type header)
        body: 원본 본문 (Raw body bytes)

    Returns:
        Any: 마스킹된 dict, multipart 필드 이름 목록, 또는 설명 문자열
             (Masked dict, list of multipart field names, or a placeholder)
    """
    if not body:
        return None
    content_type = content_type.lower()
    try:
        if content_type.startswith("multipart/form-data"):
            names: list[str] = [m.decode("utf-8", "replace") for m in _PART_NAME.findall(body)]
            return {"multipart_fields": names}
        if content_type.startswith("application/x-www-form-urlencoded"):
            return _mask_dict(dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True)))
        return _mask_dict(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(unparsed body)"


def extract_error(content_type: str, body: bytes) -> str:
    """오류 응답에서 사유를 꺼냅니다 (JSON ``message``/``detail``; HTML is not kept)."""
    if "json" not in content_type.lower():
        return f"({content_type or 'no content type'})"
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]
    detail: Any = data.get("message") or data.get("detail") if isinstance(data, dict) else data
    detail = str(detail)
    return detail[:500] + "..." if len(detail) > 500 else detail


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 요청/응답을 로깅하는 미들웨어.

    Middleware that logs every request and response locally and, when
    configured, to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 스킵 — Skip excluded paths
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()

        # 요청 데이터 수집 — Collect request data
        method = request.method
        path = request.url.path
        query_params = dict(request.query_params) if request.query_params else None
        ajax: bool = request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"

        request_body: Any = None
        if method in ("POST", "PUT", "PATCH"):
            request_body = summarize_body(
                request.headers.get("content-type", ""), await request.body()
            )

        # 응답 처리 — Process response
        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = extract_error(response.headers.get("content-type", ""), resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.time() - start_time) * 1000, 2)

            log_event: dict[str, Any] = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "ajax": ajax,
            }
            if query_params:
                log_event["query_params"] = _mask_dict(query_params)
            if request.path_params:
                log_event["path_params"] = dict(request.path_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail

            log = logger.bind(**log_event)
            if status_code >= 500:
                log.error(f"{method} {path} -> {status_code} ({duration_ms} ms) {error_detail or ''}")
            elif status_code >= 400:
                log.warning(f"{method} {path} -> {status_code} ({duration_ms} ms) {error_detail or ''}")
            else:
                log.info(f"{method} {path} -> {status_code} ({duration_ms} ms)")

            # Axiom 전송 — Send to Axiom
            if self._client is not None:
                try:
                    self._client.ingest_events(self._dataset, [log_event])
                except Exception as exc:
                    # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
                    logger.warning(f"Axiom ingest failed: {exc}")

        return response
