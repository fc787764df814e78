"""FastAPI 의존성 주입 모듈 — 세션 가드 (액세스 토큰 인증).

FastAPI dependency injection module — Session guard.
Routes that need an identity declare ``Depends(get_current_user)``; the
check runs before the handler body and short-circuits the request with a
401 on any failure. Rotation never happens here: an expired access token
always requires the client to call ``/auth/refresh``.

Authentication Flow:
    1. 액세스 토큰 추출 — Authorization: Bearer 헤더 또는 accessToken 쿠키
       (Token from the Authorization header, falling back to the accessToken cookie)
    2. decode_access_token()이 서명, 만료, 유형을 검증
       (Signature, expiry and token type are verified)
    3. 페이로드의 "sub"로 DB에서 활성 사용자 조회
       (Active user is fetched using the "sub" claim)
    4. 비밀 필드를 제외한 UserProfile을 반환하고 request.state.user에 저장
       (A secret-free UserProfile is returned and stored on request.state.user)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.database import get_db
from vidtube.models.user import User
from vidtube.repositories.user_repository import user_repository
from vidtube.schemas.auth import UserProfile
from vidtube.utils.exceptions import AuthFailure, UnauthorizedError
from vidtube.utils.jwt import decode_access_token

# HTTP Bearer 토큰 추출기 — 헤더가 없어도 쿠키로 대체 가능하므로 auto_error=False
# Header is optional because the cookie is an accepted fallback
security: HTTPBearer = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: HTTPAuthorizationCredentials | None,
    access_cookie: str | None,
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return access_cookie or None


async def _resolve_user(db: AsyncSession, token: str) -> UserProfile:
    try:
        payload: dict = decode_access_token(token)
        user_id: UUID = UUID(str(payload["sub"]))
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token has expired", code=AuthFailure.TOKEN_EXPIRED)
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid access token", code=AuthFailure.INVALID_TOKEN)

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Invalid access token", code=AuthFailure.INVALID_TOKEN)

    return UserProfile.model_validate(user)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
    access_cookie: Annotated[str | None, Cookie(alias="accessToken")] = None,
) -> UserProfile:
    """액세스 토큰에서 현재 인증된 사용자를 추출합니다.

    Resolve the authenticated identity for the request.

    Returns:
        UserProfile: 비밀 필드가 제외된 사용자 (User with secret fields excluded)

    Raises:
        UnauthorizedError(missing_token): 토큰 없음 (No token presented)
        UnauthorizedError(token_expired): 토큰 만료 (Expired token)
        UnauthorizedError(invalid_token): 형식/서명 오류, 사용자 없음 또는 비활성
                                          (Malformed, bad signature, unknown or inactive user)
    """
    token: str | None = _extract_token(credentials, access_cookie)
    if token is None:
        raise UnauthorizedError("Unauthorized request", code=AuthFailure.MISSING_TOKEN)

    user: UserProfile = await _resolve_user(db, token)
    request.state.user = user
    return user


async def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
    access_cookie: Annotated[str | None, Cookie(alias="accessToken")] = None,
) -> UserProfile | None:
    """공개 엔드포인트용 — 토큰이 없으면 None, 있으면 검증.

    Public-endpoint variant: anonymous callers get ``None``, but a token
    that is presented must still be valid.
    """
    token: str | None = _extract_token(credentials, access_cookie)
    if token is None:
        return None

    user: UserProfile = await _resolve_user(db, token)
    request.state.user = user
    return user
