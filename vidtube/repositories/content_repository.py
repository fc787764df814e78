"""콘텐츠 레포지토리 — 영상/댓글/트윗 존재 확인 및 채널 영상 집계.

Content Repository — Existence checks for relationship targets and the
per-channel video aggregates used by channel statistics.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.content import Comment, Tweet, Video
from vidtube.repositories.base import BaseRepository


class VideoRepository(BaseRepository[Video]):
    """영상 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Video)

    async def get_owner_totals(
        self,
        db: AsyncSession,
        owner_id: UUID,
    ) -> tuple[int, int]:
        """채널의 영상 수와 총 조회수를 반환합니다.

        Return ``(video_count, total_views)`` for a channel.
        """
        query: Select = select(
            func.count(Video.id).label("video_count"),
            func.coalesce(func.sum(Video.views), 0).label("total_views"),
        ).where(Video.owner_id == owner_id)
        row = (await db.execute(query)).one()
        return int(row.video_count or 0), int(row.total_views or 0)

    def channel_videos_query(self, channel_id: UUID, include_unpublished: bool = False) -> Select:
        """채널 영상 목록 쿼리 — Videos of a channel, newest first.

        Unpublished videos are included only when ``include_unpublished`` is set.
        """
        query: Select = select(Video).where(Video.owner_id == channel_id)
        if not include_unpublished:
            query = query.where(Video.is_published.is_(True))
        return query.order_by(Video.created_at.desc())


class CommentRepository(BaseRepository[Comment]):
    """댓글 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Comment)


class TweetRepository(BaseRepository[Tweet]):
    """트윗 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Tweet)


# 싱글턴 인스턴스 — Singleton instances
video_repository: VideoRepository = VideoRepository()
comment_repository: CommentRepository = CommentRepository()
tweet_repository: TweetRepository = TweetRepository()
