"""관계 토글 라우터 — 구독/좋아요 토글.

Relationship Toggle Router. One endpoint serves every kind:
``POST /toggle/{kind}/{target_id}`` where kind is subscription,
like-video, like-comment or like-tweet.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user
from vidtube.database import get_db
from vidtube.models.relationship import RelationshipKind
from vidtube.schemas.auth import UserProfile
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.relationship import EdgeState, ToggleResponse
from vidtube.services.relationship_service import relationship_service
from vidtube.utils.response import ok

router: APIRouter = APIRouter()

# 결과별 메시지 — Response message per kind and resulting state
_MESSAGES: dict[RelationshipKind, tuple[str, str]] = {
    RelationshipKind.SUBSCRIPTION: ("Channel subscribed successfully", "Channel unsubscribed successfully"),
    RelationshipKind.LIKE_VIDEO: ("Video liked successfully", "Video unliked"),
    RelationshipKind.LIKE_COMMENT: ("Comment liked successfully", "Comment unliked"),
    RelationshipKind.LIKE_TWEET: ("Tweet liked successfully", "Tweet unliked"),
}


@router.post("/{kind}/{target_id}", response_model=ApiResponse[ToggleResponse])
async def toggle_relationship(
    kind: RelationshipKind,
    target_id: str,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ApiResponse[ToggleResponse]:
    """관계를 토글합니다.

    201 when this call created the edge, 200 when it removed the edge or
    found it already activated by a concurrent call.
    """
    result: ToggleResponse = await relationship_service.toggle(db, current_user.id, target_id, kind)
    await db.commit()

    code: int = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    response.status_code = code
    activated, deactivated = _MESSAGES[kind]
    message: str = activated if result.state == EdgeState.ACTIVE else deactivated
    return ok(result, message, code)
