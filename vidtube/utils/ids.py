"""경로 파라미터 ID 파싱 유틸리티.

Path parameter id parsing. Malformed ids are a client error (400),
distinct from well-formed ids that resolve to nothing (404).
"""

from uuid import UUID

from vidtube.utils.exceptions import ValidationError


def parse_uuid(value: str, label: str = "ID") -> UUID:
    """문자열을 UUID로 변환합니다. 형식 오류 시 ValidationError.

    Args:
        value: 원본 문자열 (Raw path value)
        label: 오류 메시지용 이름 (Name used in the error message, e.g. "channel ID")

    Raises:
        ValidationError: UUID 형식이 아닐 때 (When value is not a UUID)
    """
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(f"Invalid {label}.")
