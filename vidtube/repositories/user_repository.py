"""사용자 레포지토리 — 계정 조회 및 자격 증명 검색.

User Repository — Account lookups used by authentication and
by the toggle engine when a channel is the relationship target.
"""

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.user import User
from vidtube.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_identifier(
        self,
        db: AsyncSession,
        identifier: str,
    ) -> User | None:
        """사용자명 또는 이메일로 사용자를 조회합니다.

        Retrieve a user whose username or email equals the identifier
        (case-insensitive; both columns are stored lower-cased).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            identifier: 사용자명 또는 이메일 (Username or email)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        value: str = identifier.strip().lower()
        query: Select = select(User).where(
            or_(User.username == value, User.email == value)
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> User | None:
        """사용자명으로 사용자를 조회합니다 (대소문자 무시).

        Retrieve a user by username; usernames are stored lower-cased.
        """
        query: Select = select(User).where(User.username == username.strip().lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_conflicting(
        self,
        db: AsyncSession,
        username: str,
        email: str,
    ) -> User | None:
        """같은 사용자명 또는 이메일을 가진 계정을 찾습니다.

        Find an account that already uses the given username or email.
        """
        query: Select = select(User).where(
            or_(User.username == username.lower(), User.email == email.lower())
        )
        result = await db.execute(query)
        return result.scalars().first()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
