"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns.
The application's exception handlers turn them into JSON for AJAX callers
and into HTML error pages for regular form posts.

Usage:
    from app.utils.exceptions import NotFoundError, ValidationFailedError
    raise NotFoundError("Marca no encontrada.")
    raise ValidationFailedError(["El nombre es obligatorio."])
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a brand or model identifier does not resolve.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Recurso no encontrado.") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request itself is malformed (e.g. an upload that is not an image).

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Solicitud incorrecta.") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationFailedError(BadRequestError):
    """400 검증 실패 예외 — 폼 규칙 위반 목록을 담습니다.

    Form validation failure carrying every violated rule message.
    ``detail`` is the newline-joined list, the form the JSON responses use.

    Args:
        errors: 오류 메시지 목록 (List of error messages)
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors: list[str] = list(errors)
        super().__init__(detail="\n".join(self.errors))

