"""리프레시 세션 레포지토리 — 계정당 단일 리프레시 토큰 핸들 관리.

Refresh Session Repository — Maintains the single stored refresh-token
handle per account: overwrite on issue, compare-and-replace on rotation,
delete on logout.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.token import RefreshSession


class SessionRepository:
    """리프레시 세션 쿼리를 담당하는 레포지토리.

    Repository handling refresh session queries.
    """

    async def get_session(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> RefreshSession | None:
        """사용자의 현재 리프레시 세션을 조회합니다.

        Retrieve the current refresh session for a user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User UUID)

        Returns:
            RefreshSession | None: 세션 또는 None (로그아웃 상태)
                                   (Session, or None when logged out)
        """
        # populate_existing — 다른 요청이 갱신한 값을 항상 다시 읽음 (Always re-read, never trust the identity map)
        query: Select = (
            select(RefreshSession)
            .where(RefreshSession.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def replace_session(
        self,
        db: AsyncSession,
        user_id: UUID,
        token_id: str,
        expires_at: datetime,
    ) -> None:
        """저장된 토큰 핸들을 새 값으로 덮어씁니다 (없으면 생성).

        Overwrite the stored handle with ``token_id``, creating the row when
        the account has no session yet. Full replacement, never append.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User UUID)
            token_id: 새 리프레시 토큰 jti (New refresh token jti)
            expires_at: 새 토큰 만료 일시 (New token expiration)
        """
        stmt = (
            update(RefreshSession)
            .where(RefreshSession.user_id == user_id)
            .values(token_id=token_id, expires_at=expires_at, updated_at=datetime.now(timezone.utc))
        )
        result = await db.execute(stmt)
        if result.rowcount:
            return

        # 세션 없음 — 생성 (동시 로그인이 먼저 생성했다면 덮어쓰기)
        # No row yet: insert, falling back to overwrite if a concurrent login created it first
        try:
            async with db.begin_nested():
                db.add(RefreshSession(user_id=user_id, token_id=token_id, expires_at=expires_at))
        except IntegrityError:
            await db.execute(stmt)

    async def compare_and_replace(
        self,
        db: AsyncSession,
        user_id: UUID,
        expected_token_id: str,
        new_token_id: str,
        expires_at: datetime,
    ) -> bool:
        """저장된 핸들이 기대값과 같을 때만 교체합니다.

        Replace the stored handle only if it still equals ``expected_token_id``.
        A single conditional UPDATE, so of two rotations presenting the same
        token at most one matches.

        Returns:
            bool: 교체 성공 여부 (True if this call performed the rotation)
        """
        stmt = (
            update(RefreshSession)
            .where(
                RefreshSession.user_id == user_id,
                RefreshSession.token_id == expected_token_id,
            )
            .values(token_id=new_token_id, expires_at=expires_at, updated_at=datetime.now(timezone.utc))
        )
        result = await db.execute(stmt)
        return result.rowcount == 1

    async def delete_session(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> bool:
        """사용자의 리프레시 세션을 삭제합니다 (로그아웃).

        Delete the user's refresh session, clearing the stored handle.

        Returns:
            bool: 삭제된 세션이 있었는지 여부 (Whether a session existed)
        """
        stmt = (
            delete(RefreshSession)
            .where(RefreshSession.user_id == user_id)
        )
        result = await db.execute(stmt)
        return bool(result.rowcount)


# 싱글턴 인스턴스 — Singleton instance
session_repository: SessionRepository = SessionRepository()
