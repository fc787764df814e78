"""관계 토글 API 테스트 — 구독/좋아요 토글, 멱등성, 동시 생성 경합.

Relationship toggle API tests — Subscription and like toggles, pair
idempotence, validation failures and the concurrent-insert path.
"""

import asyncio
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tests.conftest import auth_header, create_user
from vidtube.models.relationship import RelationshipEdge, RelationshipKind
from vidtube.repositories.relationship_repository import relationship_repository
from vidtube.schemas.relationship import EdgeState
from vidtube.services.relationship_service import relationship_service

TOGGLE = "/api/v1/toggle"


async def _edge_count(db, subject_id, target_id, kind: RelationshipKind) -> int:
    query = select(func.count(RelationshipEdge.id)).where(
        RelationshipEdge.subject_id == subject_id,
        RelationshipEdge.target_id == target_id,
        RelationshipEdge.kind == kind.value,
    )
    return (await db.execute(query)).scalar()


# ===== Subscription =====

class TestSubscriptionToggle:
    """구독 토글 테스트."""

    async def test_subscribe_then_unsubscribe(self, client: AsyncClient, alice, bob, bob_token):
        """첫 토글 201 active, 두 번째 토글 200 inactive."""
        res = await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(bob_token))
        assert res.status_code == 201
        body = res.json()
        assert body["statusCode"] == 201
        assert body["data"]["state"] == "active"
        assert body["data"]["created"] is True
        assert body["data"]["edge"]["subjectId"] == str(bob.id)
        assert body["data"]["edge"]["targetId"] == str(alice.id)
        assert body["data"]["edge"]["kind"] == "subscription"

        res = await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(bob_token))
        assert res.status_code == 200
        assert res.json()["data"]["state"] == "inactive"
        assert res.json()["data"]["edge"] is None

    async def test_toggle_pair_restores_state(self, client: AsyncClient, db, alice, bob, bob_token):
        """토글 두 번이면 원래 상태 — 엣지 없음."""
        for _ in range(2):
            await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(bob_token))
        assert await _edge_count(db, bob.id, alice.id, RelationshipKind.SUBSCRIPTION) == 0

        await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(bob_token))
        assert await _edge_count(db, bob.id, alice.id, RelationshipKind.SUBSCRIPTION) == 1

    async def test_self_subscribe_allowed(self, client: AsyncClient, alice, alice_token):
        """자기 자신 구독 허용."""
        res = await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(alice_token))
        assert res.status_code == 201

    async def test_subscribe_unknown_channel(self, client: AsyncClient, bob_token):
        """존재하지 않는 채널 — 404."""
        res = await client.post(f"{TOGGLE}/subscription/{uuid.uuid4()}", headers=auth_header(bob_token))
        assert res.status_code == 404
        assert res.json()["message"] == "Channel not found"

    async def test_malformed_target_id(self, client: AsyncClient, bob_token):
        """잘못된 ID 형식 — 400."""
        res = await client.post(f"{TOGGLE}/subscription/not-a-uuid", headers=auth_header(bob_token))
        assert res.status_code == 400
        assert res.json()["code"] == "validation_error"

    async def test_unauthenticated(self, client: AsyncClient, alice):
        """토큰 없음 — 401, 엣지 생성 없음."""
        res = await client.post(f"{TOGGLE}/subscription/{alice.id}")
        assert res.status_code == 401
        assert res.json()["code"] == "missing_token"


# ===== Likes =====

class TestLikeToggle:
    """좋아요 토글 테스트."""

    async def test_like_video(self, client: AsyncClient, video, bob_token):
        res = await client.post(f"{TOGGLE}/like-video/{video.id}", headers=auth_header(bob_token))
        assert res.status_code == 201
        assert res.json()["message"] == "Video liked successfully"

        res = await client.post(f"{TOGGLE}/like-video/{video.id}", headers=auth_header(bob_token))
        assert res.status_code == 200
        assert res.json()["message"] == "Video unliked"

    async def test_like_comment(self, client: AsyncClient, comment, alice_token):
        res = await client.post(f"{TOGGLE}/like-comment/{comment.id}", headers=auth_header(alice_token))
        assert res.status_code == 201
        assert res.json()["data"]["edge"]["kind"] == "like-comment"

    async def test_like_tweet(self, client: AsyncClient, tweet, bob_token):
        res = await client.post(f"{TOGGLE}/like-tweet/{tweet.id}", headers=auth_header(bob_token))
        assert res.status_code == 201

    async def test_like_own_video_allowed(self, client: AsyncClient, video, alice_token):
        res = await client.post(f"{TOGGLE}/like-video/{video.id}", headers=auth_header(alice_token))
        assert res.status_code == 201

    @pytest.mark.parametrize("kind,label", [
        ("like-video", "Video"),
        ("like-comment", "Comment"),
        ("like-tweet", "Tweet"),
    ])
    async def test_like_missing_target(self, client: AsyncClient, bob_token, kind, label):
        res = await client.post(f"{TOGGLE}/{kind}/{uuid.uuid4()}", headers=auth_header(bob_token))
        assert res.status_code == 404
        assert res.json()["message"] == f"{label} not found"

    async def test_kind_mismatch_is_not_found(self, client: AsyncClient, alice, bob_token):
        """계정 ID로 영상 좋아요 — 해당 종류의 대상이 없으므로 404."""
        res = await client.post(f"{TOGGLE}/like-video/{alice.id}", headers=auth_header(bob_token))
        assert res.status_code == 404

    async def test_unknown_kind(self, client: AsyncClient, video, bob_token):
        res = await client.post(f"{TOGGLE}/like-playlist/{video.id}", headers=auth_header(bob_token))
        assert res.status_code == 400

    async def test_kinds_are_independent(self, client: AsyncClient, db, alice, bob, bob_token):
        """같은 대상이라도 종류가 다르면 별개 엣지."""
        await client.post(f"{TOGGLE}/subscription/{alice.id}", headers=auth_header(bob_token))
        assert await _edge_count(db, bob.id, alice.id, RelationshipKind.SUBSCRIPTION) == 1
        assert await _edge_count(db, bob.id, alice.id, RelationshipKind.LIKE_VIDEO) == 0


# ===== Concurrency =====

class TestConcurrentToggle:
    """동시 토글 경합 테스트."""

    async def test_concurrent_insert_reports_active(
        self, client: AsyncClient, db, monkeypatch, video, bob, bob_token,
    ):
        """다른 요청이 먼저 생성한 경우 — 유니크 제약 위반을 active/created=False로 보고.

        The lookup is forced to miss once while the edge already exists, which
        is exactly what the losing side of two simultaneous toggles observes.
        """
        db.add(RelationshipEdge(subject_id=bob.id, target_id=video.id, kind=RelationshipKind.LIKE_VIDEO.value))
        await db.flush()

        original = relationship_repository.get_edge
        calls = {"n": 0}

        async def _miss_once(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await original(*args, **kwargs)

        monkeypatch.setattr(relationship_repository, "get_edge", _miss_once)

        res = await client.post(f"{TOGGLE}/like-video/{video.id}", headers=auth_header(bob_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["state"] == "active"
        assert data["created"] is False
        assert data["edge"]["targetId"] == str(video.id)
        assert await _edge_count(db, bob.id, video.id, RelationshipKind.LIKE_VIDEO) == 1


@pytest_asyncio.fixture
async def writer_sessions(engine):
    """같은 DB 파일에 대한 독립 세션 팩토리 — 요청마다 별도 연결.

    Each session takes the write lock at BEGIN, so concurrent writers queue
    on SQLite's busy timeout instead of failing on lock upgrade.
    """
    eng = create_async_engine(engine.url, echo=False)

    @event.listens_for(eng.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    yield async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)
    await eng.dispose()


async def _toggle_in_own_session(factory, subject_id, target_id, kind: RelationshipKind):
    async with factory() as session:
        result = await relationship_service.toggle(session, subject_id, str(target_id), kind)
        await session.commit()
        return result


class TestConcurrentSessions:
    """독립 세션에서 동시에 실행되는 토글 테스트."""

    async def test_same_tuple_toggles_never_duplicate(self, db, writer_sessions, video, bob):
        """같은 튜플에 대한 N개의 동시 토글 — 엣지는 최대 하나, 최종 상태는 홀짝과 일치."""
        await db.commit()

        results = await asyncio.gather(*[
            _toggle_in_own_session(writer_sessions, bob.id, video.id, RelationshipKind.LIKE_VIDEO)
            for _ in range(5)
        ])

        activated = [r for r in results if r.state == EdgeState.ACTIVE]
        deactivated = [r for r in results if r.state == EdgeState.INACTIVE]
        assert len(activated) == 3
        assert len(deactivated) == 2
        assert await _edge_count(db, bob.id, video.id, RelationshipKind.LIKE_VIDEO) == 1

    async def test_distinct_subscribers_all_counted(self, db, writer_sessions, alice):
        """서로 다른 구독자의 동시 구독 — 모두 생성."""
        fans = [await create_user(db, f"fan{i}") for i in range(4)]
        await db.commit()

        results = await asyncio.gather(*[
            _toggle_in_own_session(writer_sessions, fan.id, alice.id, RelationshipKind.SUBSCRIPTION)
            for fan in fans
        ])

        assert all(r.created for r in results)
        assert await relationship_repository.count_by_target(db, alice.id, RelationshipKind.SUBSCRIPTION) == 4
