"""구독 목록 라우터 — 채널 구독자 목록, 사용자 구독 채널 목록.

Subscription list router. Both lists are public and paginated.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.database import get_db
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.relationship import ChannelSummary
from vidtube.services.aggregate_service import aggregate_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()


@router.get("/channels/{channel_id}/subscribers", response_model=ApiResponse[Page[ChannelSummary]])
async def list_channel_subscribers(
    channel_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> ApiResponse[Page[ChannelSummary]]:
    """채널 구독자 목록 조회."""
    result: Page[ChannelSummary] = await aggregate_service.list_subscribers(db, channel_id, page, per_page)
    return ok(result, "Subscribers fetched successfully")


@router.get("/users/{subscriber_id}/channels", response_model=ApiResponse[Page[ChannelSummary]])
async def list_subscribed_channels(
    subscriber_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> ApiResponse[Page[ChannelSummary]]:
    """사용자가 구독 중인 채널 목록 조회."""
    result: Page[ChannelSummary] = await aggregate_service.list_subscribed_channels(
        db, subscriber_id, page, per_page
    )
    return ok(result, "Subscribed channels fetched successfully")
