"""좋아요 목록 라우터."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user
from vidtube.database import get_db
from vidtube.schemas.auth import UserProfile
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.relationship import VideoSummary
from vidtube.services.aggregate_service import aggregate_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()


@router.get("/videos", response_model=ApiResponse[Page[VideoSummary]])
async def list_liked_videos(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
) -> ApiResponse[Page[VideoSummary]]:
    """호출자가 좋아요한 영상 목록 — Videos the caller has liked, most recent like first."""
    result: Page[VideoSummary] = await aggregate_service.list_liked_videos(
        db, current_user.id, page, per_page
    )
    return ok(result, "Liked videos fetched successfully")
