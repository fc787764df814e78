"""인증 서비스 — 회원가입, 로그인, 토큰 발급/회전, 로그아웃 비즈니스 로직.

Auth Service — Business logic for registration, login, token issuance,
refresh-token rotation and logout.

Each account has exactly one stored refresh-token handle (the ``jti`` of
its current refresh token). Issuing a pair overwrites it, rotation
compares-then-replaces it, logout deletes it. A superseded refresh token
therefore always fails rotation, even before it expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import settings
from vidtube.models.user import User
from vidtube.repositories.session_repository import session_repository
from vidtube.repositories.user_repository import user_repository
from vidtube.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    TokenPair,
    UserProfile,
)
from vidtube.utils.exceptions import (
    AuthFailure,
    DuplicateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from vidtube.utils.jwt import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    new_token_id,
)
from vidtube.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic: credential checks,
    token pair issuance, rotation and revocation.
    """

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> UserProfile:
        """회원가입을 처리합니다.

        Create a new account. Username and email are lower-cased and must
        not already be in use.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            UserProfile: 생성된 계정 프로필 (Created account profile)

        Raises:
            ValidationError: 필수 필드가 비어 있을 때 (Blank required field)
            DuplicateError: 사용자명 또는 이메일이 이미 존재할 때
                            (Username or email already in use)
        """
        fields = [data.full_name, data.email, data.username, data.password]
        if any(not field.strip() for field in fields):
            raise ValidationError("All fields are required")

        existing: User | None = await user_repository.find_conflicting(
            db, data.username.strip(), data.email.strip()
        )
        if existing is not None:
            raise DuplicateError("User with email or username already exists")

        # 동시 가입이 먼저 생성한 경우 — A concurrent registration can still win the unique constraint
        try:
            async with db.begin_nested():
                user: User = await user_repository.create(db, {
                    "username": data.username.strip().lower(),
                    "email": data.email.strip().lower(),
                    "full_name": data.full_name.strip(),
                    "avatar": data.avatar,
                    "cover_image": data.cover_image,
                    "password_hash": hash_password(data.password),
                })
        except IntegrityError:
            raise DuplicateError("User with email or username already exists")

        logger.info("Account registered", extra={"user_id": user.id})
        return UserProfile.model_validate(user)

    async def authenticate(
        self,
        db: AsyncSession,
        identifier: str,
        password: str,
    ) -> User:
        """자격 증명을 검증하고 계정을 반환합니다.

        Look up an account by username or email and verify the password.
        Missing account, wrong password and deactivated account all fail
        the same way so callers cannot probe which accounts exist.

        Raises:
            UnauthorizedError(invalid_credentials): 인증 실패 (Authentication failed)
        """
        user: User | None = await user_repository.get_by_identifier(db, identifier)
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid user credentials", code=AuthFailure.INVALID_CREDENTIALS)
        if not user.is_active:
            raise UnauthorizedError("Invalid user credentials", code=AuthFailure.INVALID_CREDENTIALS)
        return user

    async def issue_token_pair(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenPair:
        """액세스/리프레시 토큰 쌍을 발급하고 저장된 핸들을 덮어씁니다.

        Mint a token pair and overwrite the account's stored refresh handle
        with the new refresh token's id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenPair: 새 토큰 쌍 (New token pair)
        """
        token_id: str = new_token_id()
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        await session_repository.replace_session(db, user.id, token_id, expires_at)
        return self._mint(user, token_id)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> tuple[UserProfile, TokenPair]:
        """로그인 — 자격 증명 검증 후 토큰 쌍 발급.

        Raises:
            ValidationError: username/email 모두 없을 때 (Neither identifier given)
            UnauthorizedError(invalid_credentials): 인증 실패 (Authentication failed)
        """
        identifier: str | None = data.username or data.email
        if not identifier or not identifier.strip():
            raise ValidationError("username or email is required")

        user: User = await self.authenticate(db, identifier, data.password)
        tokens: TokenPair = await self.issue_token_pair(db, user)
        logger.info("User logged in", extra={"user_id": user.id})
        return UserProfile.model_validate(user), tokens

    async def rotate(
        self,
        db: AsyncSession,
        presented_token: str | None,
    ) -> TokenPair:
        """리프레시 토큰을 회전하여 새 토큰 쌍을 발급합니다.

        Verify the presented refresh token, check it against the account's
        stored handle and, if it matches, replace the handle and mint a new
        pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            presented_token: 제시된 리프레시 토큰 (Presented refresh token)

        Returns:
            TokenPair: 새 토큰 쌍 (New token pair)

        Raises:
            UnauthorizedError(missing_token): 토큰 없음 (No token presented)
            UnauthorizedError(token_expired): 만료 (Expired)
            UnauthorizedError(invalid_token): 서명/형식 오류 또는 계정 없음
                                              (Bad signature, malformed, unknown account)
            UnauthorizedError(token_revoked): 로그아웃 이후 (No stored handle)
            UnauthorizedError(stale_token): 이미 교체된 토큰 (Superseded token)
        """
        if not presented_token:
            raise UnauthorizedError("Unauthorized request", code=AuthFailure.MISSING_TOKEN)

        try:
            payload: dict = decode_refresh_token(presented_token)
            user_id: UUID = UUID(str(payload["sub"]))
            presented_id: str = str(payload["jti"])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Refresh token has expired", code=AuthFailure.TOKEN_EXPIRED)
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise UnauthorizedError("Invalid refresh token", code=AuthFailure.INVALID_TOKEN)

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("Invalid refresh token", code=AuthFailure.INVALID_TOKEN)

        session = await session_repository.get_session(db, user_id)
        if session is None:
            raise UnauthorizedError("Session has been revoked. Please sign in again", code=AuthFailure.TOKEN_REVOKED)
        if session.token_id != presented_id:
            logger.warning("Stale refresh token presented", extra={"user_id": user_id})
            raise UnauthorizedError("Refresh token is expired or used", code=AuthFailure.STALE_TOKEN)

        new_id: str = new_token_id()
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        replaced: bool = await session_repository.compare_and_replace(
            db, user_id, presented_id, new_id, expires_at
        )
        if not replaced:
            # 동시 회전에서 패배 — Lost a concurrent rotation of the same token
            logger.warning("Concurrent rotation lost", extra={"user_id": user_id})
            raise UnauthorizedError("Refresh token is expired or used", code=AuthFailure.STALE_TOKEN)

        return self._mint(user, new_id)

    async def revoke(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """로그아웃 — 저장된 리프레시 핸들을 제거합니다.

        Clear the stored handle; rotation fails until the next login.
        """
        await session_repository.delete_session(db, user_id)
        logger.info("User logged out", extra={"user_id": user_id})

    async def get_me(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserProfile:
        """현재 로그인한 사용자 프로필을 반환합니다."""
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserProfile.model_validate(user)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: ChangePasswordRequest,
    ) -> None:
        """비밀번호를 변경합니다.

        Raises:
            ValidationError: 기존 비밀번호 불일치 또는 새 비밀번호가 비어 있음
                             (Old password mismatch or blank new password)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(data.old_password, user.password_hash):
            raise ValidationError("Invalid old password")
        if not data.new_password.strip():
            raise ValidationError("New password is required")

        user.password_hash = hash_password(data.new_password)
        await db.flush()

    def _mint(self, user: User, token_id: str) -> TokenPair:
        """토큰 쌍 서명 — Sign the access/refresh pair for ``user``."""
        access_token: str = create_access_token({"sub": str(user.id), "username": user.username})
        refresh_token: str = create_refresh_token({"sub": str(user.id)}, token_id=token_id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
