"""관계 엣지 레포지토리 — 구독/좋아요 엣지 조회, 생성, 삭제, 집계.

Relationship Edge Repository — Lookup, insert, delete and counting of
subscription and like edges. Every method is keyed by the exact
(subject, target, kind) tuple or a projection of it.
"""

from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.content import Video
from vidtube.models.relationship import RelationshipEdge, RelationshipKind
from vidtube.models.user import User


class RelationshipRepository:
    """관계 엣지 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    async def get_edge(
        self,
        db: AsyncSession,
        subject_id: UUID,
        target_id: UUID,
        kind: RelationshipKind,
    ) -> RelationshipEdge | None:
        """정확한 튜플에 해당하는 엣지를 조회합니다.

        Retrieve the edge for the exact (subject, target, kind) tuple.
        """
        query: Select = select(RelationshipEdge).where(
            RelationshipEdge.subject_id == subject_id,
            RelationshipEdge.target_id == target_id,
            RelationshipEdge.kind == kind.value,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_edge(
        self,
        db: AsyncSession,
        subject_id: UUID,
        target_id: UUID,
        kind: RelationshipKind,
    ) -> RelationshipEdge:
        """엣지를 SAVEPOINT 안에서 생성합니다.

        Insert the edge inside a SAVEPOINT so that a unique-constraint
        violation only rolls back this insert, not the caller's transaction.

        Raises:
            sqlalchemy.exc.IntegrityError: 같은 튜플이 이미 존재할 때
                                           (The tuple already exists)
        """
        edge: RelationshipEdge = RelationshipEdge(
            subject_id=subject_id,
            target_id=target_id,
            kind=kind.value,
        )
        async with db.begin_nested():
            db.add(edge)
        return edge

    async def delete_edge(
        self,
        db: AsyncSession,
        subject_id: UUID,
        target_id: UUID,
        kind: RelationshipKind,
    ) -> bool:
        """튜플 기준으로 엣지를 삭제합니다. 이미 없으면 아무 일도 하지 않습니다.

        Delete by tuple. A concurrent second delete affects zero rows.

        Returns:
            bool: 실제로 삭제했는지 여부 (Whether this call removed a row)
        """
        stmt = delete(RelationshipEdge).where(
            RelationshipEdge.subject_id == subject_id,
            RelationshipEdge.target_id == target_id,
            RelationshipEdge.kind == kind.value,
        )
        result = await db.execute(stmt)
        return bool(result.rowcount)

    async def count_by_target(
        self,
        db: AsyncSession,
        target_id: UUID,
        kind: RelationshipKind,
    ) -> int:
        """대상에 대한 활성 엣지 수 — Count active edges pointing at a target."""
        query: Select = select(func.count(RelationshipEdge.id)).where(
            RelationshipEdge.target_id == target_id,
            RelationshipEdge.kind == kind.value,
        )
        return (await db.execute(query)).scalar() or 0

    async def count_by_subject(
        self,
        db: AsyncSession,
        subject_id: UUID,
        kind: RelationshipKind,
    ) -> int:
        """행위자의 활성 엣지 수 — Count active edges made by a subject."""
        query: Select = select(func.count(RelationshipEdge.id)).where(
            RelationshipEdge.subject_id == subject_id,
            RelationshipEdge.kind == kind.value,
        )
        return (await db.execute(query)).scalar() or 0

    async def count_video_likes_for_owner(
        self,
        db: AsyncSession,
        owner_id: UUID,
    ) -> int:
        """소유자의 모든 영상에 달린 좋아요 수.

        Count like-video edges whose target is any video owned by ``owner_id``.
        """
        owner_videos = select(Video.id).where(Video.owner_id == owner_id)
        query: Select = select(func.count(RelationshipEdge.id)).where(
            RelationshipEdge.kind == RelationshipKind.LIKE_VIDEO.value,
            RelationshipEdge.target_id.in_(owner_videos),
        )
        return (await db.execute(query)).scalar() or 0

    def subscribers_query(self, channel_id: UUID) -> Select:
        """채널 구독자 목록 쿼리 — Accounts subscribed to ``channel_id``, newest first."""
        return (
            select(User)
            .join(RelationshipEdge, RelationshipEdge.subject_id == User.id)
            .where(
                RelationshipEdge.target_id == channel_id,
                RelationshipEdge.kind == RelationshipKind.SUBSCRIPTION.value,
            )
            .order_by(RelationshipEdge.created_at.desc())
        )

    def subscribed_channels_query(self, subscriber_id: UUID) -> Select:
        """구독 중인 채널 목록 쿼리 — Channels ``subscriber_id`` subscribes to."""
        return (
            select(User)
            .join(RelationshipEdge, RelationshipEdge.target_id == User.id)
            .where(
                RelationshipEdge.subject_id == subscriber_id,
                RelationshipEdge.kind == RelationshipKind.SUBSCRIPTION.value,
            )
            .order_by(RelationshipEdge.created_at.desc())
        )

    def liked_videos_query(self, subject_id: UUID) -> Select:
        """좋아요한 영상 목록 쿼리 — Videos liked by ``subject_id``."""
        return (
            select(Video)
            .join(RelationshipEdge, RelationshipEdge.target_id == Video.id)
            .where(
                RelationshipEdge.subject_id == subject_id,
                RelationshipEdge.kind == RelationshipKind.LIKE_VIDEO.value,
            )
            .order_by(RelationshipEdge.created_at.desc())
        )


# 싱글턴 인스턴스 — Singleton instance
relationship_repository: RelationshipRepository = RelationshipRepository()
