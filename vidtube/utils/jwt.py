"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.
Access and refresh tokens are signed with different secrets and carry
different lifetimes, so one can never be verified as the other.

JWT Payload Structure:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "iat": 1234567000,          # 발급 시간 UNIX timestamp (Issued at)
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "jti": "hex",               # 토큰 식별자 (Token identifier; for refresh tokens this is the stored handle)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }
    액세스 토큰에는 username도 포함됩니다 (Access tokens also carry "username").
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from vidtube.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def new_token_id() -> str:
    """새 토큰 식별자(jti)를 생성합니다 — Generate a fresh random token id."""
    return uuid.uuid4().hex


def _encode(
    data: dict[str, Any],
    token_type: str,
    secret: str,
    expires_delta: timedelta,
    token_id: str | None = None,
) -> str:
    to_encode: dict[str, Any] = data.copy()
    now: datetime = datetime.now(timezone.utc)
    to_encode.update({
        "iat": now,
        "exp": now + expires_delta,
        "jti": token_id or new_token_id(),
        "type": token_type,
    })
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a short-lived JWT access token signed with ACCESS_TOKEN_SECRET.

    Args:
        data: JWT 페이로드 데이터, 일반적으로 {"sub": user_id, "username": username}
              (JWT payload data)
        expires_delta: 만료 기간, 기본값은 설정값 (Override for the configured TTL)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    return _encode(
        data,
        ACCESS_TOKEN_TYPE,
        settings.ACCESS_TOKEN_SECRET,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    data: dict[str, Any],
    token_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a long-lived JWT refresh token signed with REFRESH_TOKEN_SECRET.
    ``token_id`` becomes the ``jti`` claim and must match the handle
    stored in the account's refresh session for rotation to succeed.

    Args:
        data: JWT 페이로드 데이터 (JWT payload data, typically {"sub": user_id})
        token_id: 저장될 토큰 식별자 (Identifier persisted as the session handle)
        expires_delta: 만료 기간, 기본값은 설정값 (Override for the configured TTL)

    Returns:
        str: 인코딩된 JWT 리프레시 토큰 문자열 (Encoded JWT refresh token string)
    """
    return _encode(
        data,
        REFRESH_TOKEN_TYPE,
        settings.REFRESH_TOKEN_SECRET,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        token_id=token_id,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """액세스 토큰을 디코딩하고 검증합니다.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 서명 불일치, 형식 오류, 유형 불일치 (Bad signature, malformed, wrong type)
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.ACCESS_TOKEN_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub", "jti"]},
    )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Invalid token type")
    return payload


def decode_refresh_token(token: str) -> dict[str, Any]:
    """리프레시 토큰을 디코딩하고 검증합니다.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 서명 불일치, 형식 오류, 유형 불일치 (Bad signature, malformed, wrong type)
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.REFRESH_TOKEN_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub", "jti"]},
    )
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Invalid token type")
    return payload
