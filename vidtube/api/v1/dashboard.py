"""대시보드 라우터 — 내 채널 통계, 채널 영상 목록.

Dashboard router.
    - GET /stats: 호출자 채널 통계 (Caller's own channel statistics)
    - GET /videos/{channel_id}: 채널 영상 목록, 채널 소유자는 비공개 영상 포함
      (Channel videos; the owner also sees unpublished ones)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user, get_optional_user
from vidtube.database import get_db
from vidtube.schemas.auth import UserProfile
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.relationship import ChannelStats, VideoSummary
from vidtube.services.aggregate_service import aggregate_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()


@router.get("/stats", response_model=ApiResponse[ChannelStats])
async def get_dashboard_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[ChannelStats]:
    """내 채널 통계 조회."""
    result: ChannelStats = await aggregate_service.channel_stats(db, str(current_user.id))
    return ok(result, "Channel stats fetched successfully")


@router.get("/videos/{channel_id}", response_model=ApiResponse[Page[VideoSummary]])
async def list_channel_videos(
    channel_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[UserProfile | None, Depends(get_optional_user)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> ApiResponse[Page[VideoSummary]]:
    """채널 영상 목록 조회 (최신순)."""
    result: Page[VideoSummary] = await aggregate_service.list_channel_videos(
        db, channel_id, page, per_page, viewer_id=viewer.id if viewer else None
    )
    return ok(result, "Channel videos fetched successfully")
