"""집계 뷰 서비스 — 구독자 수, 구독 상태, 채널 통계, 관계 기반 목록.

Aggregate View Service — Read-only views derived from relationship edges
and video metadata. Nothing is cached; every call recomputes from the store.

A missing referenced account is a 404. An existing channel with no
subscribers, videos or likes is a 200 with zero counts or an empty page.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.relationship import RelationshipKind
from vidtube.models.user import User
from vidtube.repositories.content_repository import video_repository
from vidtube.repositories.relationship_repository import relationship_repository
from vidtube.repositories.user_repository import user_repository
from vidtube.schemas.common import Page
from vidtube.schemas.relationship import (
    ChannelProfile,
    ChannelStats,
    ChannelSummary,
    SubscriberCount,
    SubscriptionStatus,
    VideoSummary,
)
from vidtube.utils.exceptions import NotFoundError, ValidationError
from vidtube.utils.ids import parse_uuid
from vidtube.utils.pagination import page_count, paginate


class AggregateService:
    """집계 서비스.

    Aggregation service for channel and relationship views.
    """

    async def _require_channel(self, db: AsyncSession, raw_id: str, label: str = "channel ID") -> UUID:
        channel_id: UUID = parse_uuid(raw_id, label)
        if await user_repository.get_by_id(db, channel_id) is None:
            raise NotFoundError("Channel not found")
        return channel_id

    async def subscriber_count(self, db: AsyncSession, channel_id: str) -> SubscriberCount:
        """채널 구독자 수."""
        channel_uuid: UUID = await self._require_channel(db, channel_id)
        count: int = await relationship_repository.count_by_target(
            db, channel_uuid, RelationshipKind.SUBSCRIPTION
        )
        return SubscriberCount(channel_id=channel_uuid, subscriber_count=count)

    async def subscription_status(
        self,
        db: AsyncSession,
        subject_id: UUID,
        channel_id: str,
    ) -> SubscriptionStatus:
        """호출자가 채널을 구독 중인지 여부."""
        channel_uuid: UUID = await self._require_channel(db, channel_id)
        edge = await relationship_repository.get_edge(
            db, subject_id, channel_uuid, RelationshipKind.SUBSCRIPTION
        )
        return SubscriptionStatus(channel_id=channel_uuid, is_subscribed=edge is not None)

    async def channel_stats(self, db: AsyncSession, owner_id: str) -> ChannelStats:
        """채널 통계 집계.

        ``total_views`` sums the view counters of the owner's videos;
        ``total_likes`` counts like-video edges on any of those videos.
        """
        owner_uuid: UUID = await self._require_channel(db, owner_id, "owner ID")
        video_count, total_views = await video_repository.get_owner_totals(db, owner_uuid)
        total_likes: int = await relationship_repository.count_video_likes_for_owner(db, owner_uuid)
        subscribers: int = await relationship_repository.count_by_target(
            db, owner_uuid, RelationshipKind.SUBSCRIPTION
        )
        return ChannelStats(
            owner_id=owner_uuid,
            video_count=video_count,
            total_views=total_views,
            total_likes=total_likes,
            subscriber_count=subscribers,
        )

    async def channel_profile(
        self,
        db: AsyncSession,
        username: str,
        viewer_id: UUID | None = None,
    ) -> ChannelProfile:
        """사용자명으로 채널 프로필과 구독 집계를 조회합니다.

        Channel profile by username with subscriber and subscribed-to
        counts. ``is_subscribed`` reflects the optional viewer.

        Raises:
            ValidationError: 사용자명이 비어 있음 (Blank username)
            NotFoundError: 채널 없음 (No such channel)
        """
        if not username.strip():
            raise ValidationError("username is missing")

        channel: User | None = await user_repository.get_by_username(db, username)
        if channel is None:
            raise NotFoundError("Channel does not exist")

        subscribers: int = await relationship_repository.count_by_target(
            db, channel.id, RelationshipKind.SUBSCRIPTION
        )
        subscribed_to: int = await relationship_repository.count_by_subject(
            db, channel.id, RelationshipKind.SUBSCRIPTION
        )
        is_subscribed: bool = False
        if viewer_id is not None:
            edge = await relationship_repository.get_edge(
                db, viewer_id, channel.id, RelationshipKind.SUBSCRIPTION
            )
            is_subscribed = edge is not None

        return ChannelProfile(
            id=channel.id,
            username=channel.username,
            full_name=channel.full_name,
            email=channel.email,
            avatar=channel.avatar,
            cover_image=channel.cover_image,
            subscribers_count=subscribers,
            channels_subscribed_to_count=subscribed_to,
            is_subscribed=is_subscribed,
        )

    async def list_subscribers(
        self,
        db: AsyncSession,
        channel_id: str,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[ChannelSummary]:
        """채널 구독자 목록 (페이지네이션)."""
        channel_uuid: UUID = await self._require_channel(db, channel_id)
        items, total = await paginate(
            db, relationship_repository.subscribers_query(channel_uuid), page, per_page
        )
        return Page[ChannelSummary](
            items=[ChannelSummary.model_validate(u) for u in items],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )

    async def list_subscribed_channels(
        self,
        db: AsyncSession,
        subscriber_id: str,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[ChannelSummary]:
        """사용자가 구독 중인 채널 목록 (페이지네이션)."""
        subscriber_uuid: UUID = await self._require_channel(db, subscriber_id, "subscriber ID")
        items, total = await paginate(
            db, relationship_repository.subscribed_channels_query(subscriber_uuid), page, per_page
        )
        return Page[ChannelSummary](
            items=[ChannelSummary.model_validate(u) for u in items],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )

    async def list_liked_videos(
        self,
        db: AsyncSession,
        subject_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[VideoSummary]:
        """호출자가 좋아요한 영상 목록 (페이지네이션)."""
        items, total = await paginate(
            db, relationship_repository.liked_videos_query(subject_id), page, per_page
        )
        return Page[VideoSummary](
            items=[VideoSummary.model_validate(v) for v in items],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )

    async def list_channel_videos(
        self,
        db: AsyncSession,
        channel_id: str,
        page: int = 1,
        per_page: int = 20,
        viewer_id: UUID | None = None,
    ) -> Page[VideoSummary]:
        """채널의 영상 목록, 최신순 (페이지네이션).

        Only published videos, unless the viewer owns the channel.
        """
        channel_uuid: UUID = await self._require_channel(db, channel_id)
        query = video_repository.channel_videos_query(
            channel_uuid, include_unpublished=viewer_id == channel_uuid
        )
        items, total = await paginate(db, query, page, per_page)
        return Page[VideoSummary](
            items=[VideoSummary.model_validate(v) for v in items],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )


# 싱글턴 인스턴스 — Singleton instance
aggregate_service: AggregateService = AggregateService()
