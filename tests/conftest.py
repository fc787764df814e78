"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Per-test SQLite database (aiosqlite), session, and
httpx client fixtures. Schema is created fresh in a temporary file for
every test, so nothing needs truncating afterwards.
"""

from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vidtube.database import Base, get_db
from vidtube.main import app
from vidtube.models import *  # noqa: F401,F403 — register all models with metadata
from vidtube.utils.jwt import create_access_token
from vidtube.utils.password import hash_password


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 임시 파일 DB에 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    # SAVEPOINT 지원 — pysqlite/aiosqlite의 트랜잭션 처리를 SQLAlchemy가 직접 제어
    # Let SQLAlchemy emit BEGIN itself so nested transactions (SAVEPOINT) work
    @event.listens_for(eng.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    # 500 응답도 봉투로 받기 위해 앱 예외를 다시 던지지 않음
    # Unhandled app exceptions come back as the 500 envelope instead of raising in the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(db: AsyncSession, username: str, password: str = "secret123!", **kwargs):
    """테스트 사용자를 생성합니다."""
    from vidtube.models.user import User
    user = User(
        username=username,
        email=kwargs.pop("email", f"{username}@test.com"),
        full_name=kwargs.pop("full_name", username.title()),
        password_hash=hash_password(password),
        **kwargs,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def create_video(db: AsyncSession, owner, title: str = "Video", views: int = 0, **kwargs):
    """테스트 영상을 생성합니다."""
    from vidtube.models.content import Video
    video = Video(owner_id=owner.id, title=title, views=views, **kwargs)
    db.add(video)
    await db.flush()
    await db.refresh(video)
    return video


@pytest_asyncio.fixture
async def alice(db: AsyncSession):
    """채널 소유자 역할의 사용자."""
    return await create_user(db, "alice", "alice123!")


@pytest_asyncio.fixture
async def bob(db: AsyncSession):
    """구독자 역할의 사용자."""
    return await create_user(db, "bob", "bob123!")


@pytest_asyncio.fixture
async def video(db: AsyncSession, alice):
    """alice 채널의 영상."""
    return await create_video(db, alice, "First upload", views=10)


@pytest_asyncio.fixture
async def comment(db: AsyncSession, video, bob):
    from vidtube.models.content import Comment
    c = Comment(video_id=video.id, owner_id=bob.id, content="Nice video")
    db.add(c)
    await db.flush()
    await db.refresh(c)
    return c


@pytest_asyncio.fixture
async def tweet(db: AsyncSession, alice):
    from vidtube.models.content import Tweet
    t = Tweet(owner_id=alice.id, content="New video out")
    db.add(t)
    await db.flush()
    await db.refresh(t)
    return t


def make_token(user, expires_delta: timedelta | None = None) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "username": user.username}, expires_delta)


@pytest.fixture
def alice_token(alice) -> str:
    return make_token(alice)


@pytest.fixture
def bob_token(bob) -> str:
    return make_token(bob)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
