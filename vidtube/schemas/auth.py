"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance/rotation and the public profile.
"""

from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """회원가입 요청 스키마.

    Attributes:
        full_name: 실명 (Full display name)
        email: 이메일 (Email address, lower-cased on save)
        username: 사용자 아이디 (Desired username, lower-cased on save)
        password: 비밀번호 (Plain text, will be bcrypt-hashed on server)
        avatar: 아바타 URL — 업로드는 외부 저장소 담당 (Avatar URL from the media store)
        cover_image: 커버 이미지 URL (Cover image URL, optional)
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar: str = ""
    cover_image: str = ""


class LoginRequest(CamelModel):
    """로그인 요청 스키마 — username 또는 email 중 하나 필요.

    Login request; either ``username`` or ``email`` identifies the account.
    """

    username: str | None = None
    email: str | None = None
    password: str


class RefreshRequest(CamelModel):
    """토큰 갱신 요청 스키마 — 쿠키가 없을 때 본문으로 전달.

    Body form of the refresh token, used when the cookie is absent.
    """

    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    """비밀번호 변경 요청 스키마."""

    old_password: str
    new_password: str


class TokenPair(CamelModel):
    """JWT 토큰 쌍 — Access/refresh token pair."""

    access_token: str
    refresh_token: str


class UserProfile(CamelModel):
    """공개 프로필 — 비밀 필드(비밀번호 해시, 리프레시 핸들) 제외.

    Account view with secret fields excluded. This is also the identity
    the session guard hands to route handlers.
    """

    id: UUID
    username: str
    email: str
    full_name: str
    avatar: str = ""
    cover_image: str = ""
    created_at: datetime | None = None


class LoginResponse(CamelModel):
    """로그인 응답 — 토큰 쌍과 프로필."""

    user: UserProfile
    access_token: str
    refresh_token: str
