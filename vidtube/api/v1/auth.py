"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필.

Auth Router — Registration, login, token rotation, logout and profile endpoints.
Tokens are returned in the body and also set as httpOnly cookies.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user
from vidtube.config import settings
from vidtube.database import get_db
from vidtube.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserProfile,
)
from vidtube.schemas.common import ApiResponse
from vidtube.services.auth_service import auth_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _cookie_options() -> dict[str, Any]:
    # httpOnly: 스크립트 접근 불가, secure: HTTPS 전용 (Script-inaccessible, HTTPS-only)
    return {"httponly": True, "secure": settings.COOKIE_SECURE, "samesite": "lax"}


def _set_token_cookies(response: Response, tokens: TokenPair) -> None:
    response.set_cookie(ACCESS_COOKIE, tokens.access_token, **_cookie_options())
    response.set_cookie(REFRESH_COOKIE, tokens.refresh_token, **_cookie_options())


@router.post("/register", response_model=ApiResponse[UserProfile], status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[UserProfile]:
    """회원가입 — 새 계정 생성.

    Register a new account. Media uploads happen elsewhere; the avatar and
    cover image arrive here as URLs.
    """
    profile: UserProfile = await auth_service.register(db, data)
    await db.commit()
    return ok(profile, "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LoginResponse]:
    """로그인 — 토큰 쌍 발급 및 쿠키 설정.

    Authenticate by username or email and issue a token pair.
    """
    profile, tokens = await auth_service.login(db, data)
    await db.commit()
    _set_token_cookies(response, tokens)
    return ok(
        LoginResponse(user=profile, access_token=tokens.access_token, refresh_token=tokens.refresh_token),
        "User logged in successfully",
    )


@router.post("/refresh", response_model=ApiResponse[TokenPair])
async def refresh(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_COOKIE)] = None,
) -> ApiResponse[TokenPair]:
    """토큰 갱신 — 리프레시 토큰 회전.

    Rotate the refresh token presented in the cookie (preferred) or body.
    """
    presented: str | None = refresh_cookie or (data.refresh_token if data else None)
    tokens: TokenPair = await auth_service.rotate(db, presented)
    await db.commit()
    _set_token_cookies(response, tokens)
    return ok(tokens, "Access token refreshed")


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[dict]:
    """로그아웃 — 저장된 리프레시 핸들 및 쿠키 제거."""
    await auth_service.revoke(db, current_user.id)
    await db.commit()
    response.delete_cookie(ACCESS_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_COOKIE, **_cookie_options())
    return ok({}, "User logged out")


@router.get("/me", response_model=ApiResponse[UserProfile])
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[UserProfile]:
    """현재 사용자 프로필 조회."""
    profile: UserProfile = await auth_service.get_me(db, current_user.id)
    return ok(profile, "Current user fetched successfully")


@router.post("/change-password", response_model=ApiResponse[dict])
async def change_password(
    data: ChangePasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[dict]:
    """비밀번호 변경."""
    await auth_service.change_password(db, current_user.id, data)
    await db.commit()
    return ok({}, "Password changed successfully")
