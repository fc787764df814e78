"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Every domain failure is raised as an ``ApiError`` carrying a status code,
a message, a list of error strings and an optional machine-readable code.
The handlers in ``vidtube.api.error_handlers`` turn these into the
uniform failure envelope.

Usage:
    from vidtube.utils.exceptions import NotFoundError, UnauthorizedError
    raise NotFoundError("Channel not found")
    raise UnauthorizedError("Refresh token is expired or used", code=AuthFailure.STALE_TOKEN)
"""

from fastapi import HTTPException, status


class AuthFailure:
    """401 사유 코드 — Reason codes carried by UnauthorizedError."""

    INVALID_CREDENTIALS = "invalid_credentials"
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_REVOKED = "token_revoked"
    STALE_TOKEN = "stale_token"


class ApiError(HTTPException):
    """구조화된 API 예외의 기반 클래스.

    Base class for structured API errors.

    Args:
        status_code: HTTP 상태 코드 (HTTP status code)
        message: 사용자에게 노출되는 메시지 (Client-facing message)
        errors: 상세 오류 목록, 기본값은 [message] (Error details, defaults to [message])
        code: 기계 판독용 오류 코드 (Machine-readable error code)
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        message: str = "Something went wrong",
        errors: list[str] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.message: str = message
        self.errors: list[str] = errors if errors is not None else [message]
        self.code: str | None = code


class ValidationError(ApiError):
    """400 Bad Request 예외 — 잘못된 입력(형식 오류 ID, 빈 필드 등).

    Raised for malformed input such as an id that is not a UUID.
    """

    def __init__(self, message: str = "Bad request", errors: list[str] | None = None) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, message, errors, code="validation_error")


class UnauthorizedError(ApiError):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when credentials or tokens are missing, invalid, expired or stale.
    ``code`` is one of the ``AuthFailure`` reasons.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = AuthFailure.INVALID_TOKEN,
    ) -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, code=code)


class ForbiddenError(ApiError):
    """403 Forbidden 예외 — 인증되었으나 권한이 없을 때 사용."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(status.HTTP_403_FORBIDDEN, message, code="forbidden")


class NotFoundError(ApiError):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, message, code="not_found")


class DuplicateError(ApiError):
    """409 Conflict 예외 — 고유성 제약 위반 시 사용.

    Raised when a create would violate a uniqueness requirement
    (e.g. duplicate username or email at registration).
    """

    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(status.HTTP_409_CONFLICT, message, code="conflict")


class InternalError(ApiError):
    """500 Internal Server Error 예외 — 예상치 못한 저장소 오류."""

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message, code="internal_error")
