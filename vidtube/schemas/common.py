"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions.
Includes the camelCase base model, the uniform success/failure envelopes
and the pagination page model shared by list endpoints.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase JSON 직렬화 기본 모델.

    Base model serialising fields as camelCase. Incoming payloads are
    accepted in either camelCase or snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """성공 응답 봉투 — Uniform success envelope.

    Attributes:
        status_code: HTTP 상태 코드 (HTTP status code echoed in the body)
        data: 응답 데이터 (Payload)
        message: 사람이 읽는 메시지 (Human-readable message)
        success: status_code < 400 (Derived success flag)
    """

    status_code: int = 200
    data: T | None = None
    message: str = "Success"
    success: bool = True


class ErrorResponse(CamelModel):
    """실패 응답 봉투 — Uniform failure envelope."""

    status_code: int
    data: None = None
    message: str
    success: bool = False
    errors: list[str] = []
    code: str | None = None


class Page(CamelModel, Generic[T]):
    """페이지네이션 결과 모델.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[T]
    total: int
    page: int
    per_page: int
    pages: int

