"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리 및 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and routers.
Errors are answered as ``{success: false, message}`` JSON for AJAX callers
and ``/api`` paths, and as HTML error pages otherwise.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.deps import json_error, wants_json
from app.api.web.templates import error_page
from app.config import settings
from app.database import close_client
from app.middleware.axiom_logging import AxiomLoggingMiddleware

INTERNAL_ERROR: str = "Error interno del servidor."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 시작/종료 처리 (Prepare the uploads folder; close the Mongo client)."""
    Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
    logger.info(f"{settings.APP_NAME} starting (db={settings.MONGO_DB_NAME}, uploads={settings.UPLOADS_DIR})")
    yield
    close_client()
    logger.info(f"{settings.APP_NAME} stopped")


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 로깅 미들웨어 — Request/response logging (loguru + Axiom)
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# 예외 처리 — Exception handlers
# ---------------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """HTTP 예외 — AJAX는 JSON, 그 외는 HTML 오류 화면.

    NotFoundError, BadRequestError and friends end up here.
    """
    message: str = str(exc.detail)
    if wants_json(request):
        response: Response = json_error(message, status_code=exc.status_code)
    else:
        response = error_page(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """요청 형식 오류 — 잘못된 JSON 본문 등 (Malformed request bodies → 400)."""
    messages: list[str] = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    ]
    message: str = "\n".join(messages) or "Solicitud incorrecta."
    if wants_json(request):
        return json_error(message, status_code=status.HTTP_400_BAD_REQUEST)
    return error_page(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """예상치 못한 오류 — 추적 로그 후 일반 500 응답.

    Unexpected failure: log the traceback, answer with a generic message.
    """
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    if wants_json(request):
        return json_error(INTERNAL_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return error_page(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# api_router: JSON 목록/규칙/이름 확인 (JSON listing, rules, name probes)
# web_router: HTML 화면 및 폼 작업 (HTML pages and form actions)
from app.api.ajax import api_router  # noqa: E402
from app.api.web import web_router  # noqa: E402

app.include_router(api_router, prefix="/api")
app.include_router(web_router)
