"""응답 봉투 생성 유틸리티.

Helpers that wrap payloads in the uniform ``{statusCode, data, message, success}``
envelope, and build the matching failure body.
"""

from typing import Any, TypeVar

from vidtube.schemas.common import ApiResponse, ErrorResponse

T = TypeVar("T")


def ok(data: T | None = None, message: str = "Success", status_code: int = 200) -> ApiResponse[T]:
    """성공 응답 봉투를 생성합니다 — Build a success envelope."""
    return ApiResponse[Any](
        status_code=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    )


def error_body(
    status_code: int,
    message: str,
    errors: list[str] | None = None,
    code: str | None = None,
) -> dict[str, Any]:
    """실패 응답 JSON 본문을 생성합니다 — Build a failure envelope as a JSON-ready dict."""
    return ErrorResponse(
        status_code=status_code,
        message=message,
        errors=errors if errors is not None else [message],
        code=code,
    ).model_dump(by_alias=True)
