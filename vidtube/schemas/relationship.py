"""관계 토글 및 집계 응답 스키마.

Relationship toggle and aggregate view response schemas.
"""

import enum
from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import CamelModel


class EdgeState(str, enum.Enum):
    """토글 이후 엣지 상태 — Edge state after a toggle."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class EdgeResponse(CamelModel):
    """관계 엣지 응답."""

    id: UUID
    subject_id: UUID
    target_id: UUID
    kind: str
    created_at: datetime | None = None


class ToggleResponse(CamelModel):
    """토글 결과.

    Attributes:
        state: 토글 이후 상태 (State after the call)
        edge: 활성 엣지, 비활성이면 None (Active edge, None when inactive)
        created: 이번 호출이 엣지를 생성했는지 여부
                 (False when the edge was already activated by a concurrent call)
    """

    state: EdgeState
    edge: EdgeResponse | None = None
    created: bool = False


class SubscriberCount(CamelModel):
    channel_id: UUID
    subscriber_count: int


class SubscriptionStatus(CamelModel):
    channel_id: UUID
    is_subscribed: bool


class ChannelStats(CamelModel):
    """채널 통계 — Channel statistics computed on demand."""

    owner_id: UUID
    video_count: int
    total_views: int
    total_likes: int
    subscriber_count: int


class ChannelSummary(CamelModel):
    """구독 목록에 노출되는 채널/사용자 요약."""

    id: UUID
    username: str
    full_name: str
    avatar: str = ""


class VideoSummary(CamelModel):
    """영상 요약."""

    id: UUID
    owner_id: UUID
    title: str
    thumbnail: str = ""
    duration: float = 0
    views: int = 0
    created_at: datetime | None = None


class ChannelProfile(CamelModel):
    """채널 프로필 — 채널 정보와 구독 관계 집계.

    Attributes:
        subscribers_count: 이 채널의 구독자 수 (Accounts subscribed to this channel)
        channels_subscribed_to_count: 이 채널이 구독 중인 채널 수 (Channels this account subscribes to)
        is_subscribed: 조회자가 구독 중인지 여부, 익명이면 False
                       (Whether the viewer subscribes; False for anonymous viewers)
    """

    id: UUID
    username: str
    full_name: str
    email: str
    avatar: str = ""
    cover_image: str = ""
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
