"""집계 라우터 — 구독자 수, 구독 상태, 채널 통계, 채널 프로필.

Aggregate Router — ``GET /aggregate/{kind}/{id}`` views.
Subscriber counts, channel stats and channel profiles are public;
subscription status needs the caller's identity.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user, get_optional_user
from vidtube.database import get_db
from vidtube.schemas.auth import UserProfile
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.relationship import (
    ChannelProfile,
    ChannelStats,
    SubscriberCount,
    SubscriptionStatus,
)
from vidtube.services.aggregate_service import aggregate_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()


@router.get("/subscriber-count/{channel_id}", response_model=ApiResponse[SubscriberCount])
async def get_subscriber_count(
    channel_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[SubscriberCount]:
    """채널 구독자 수 조회."""
    result: SubscriberCount = await aggregate_service.subscriber_count(db, channel_id)
    return ok(result, "Subscriber count fetched successfully")


@router.get("/subscription-status/{channel_id}", response_model=ApiResponse[SubscriptionStatus])
async def get_subscription_status(
    channel_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[SubscriptionStatus]:
    """호출자의 채널 구독 여부 조회."""
    result: SubscriptionStatus = await aggregate_service.subscription_status(db, current_user.id, channel_id)
    return ok(result, "Subscribe status fetched successfully")


@router.get("/channel-stats/{owner_id}", response_model=ApiResponse[ChannelStats])
async def get_channel_stats(
    owner_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ChannelStats]:
    """채널 통계 조회 — 영상 수, 총 조회수, 총 좋아요, 구독자 수."""
    result: ChannelStats = await aggregate_service.channel_stats(db, owner_id)
    return ok(result, "Channel stats fetched successfully")


@router.get("/channel-profile/{username}", response_model=ApiResponse[ChannelProfile])
async def get_channel_profile(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[UserProfile | None, Depends(get_optional_user)],
) -> ApiResponse[ChannelProfile]:
    """채널 프로필 조회 — 구독자 수, 구독 채널 수, 조회자 구독 여부."""
    result: ChannelProfile = await aggregate_service.channel_profile(
        db, username, viewer.id if viewer else None
    )
    return ok(result, "User channel fetched successfully")
