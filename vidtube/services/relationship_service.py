"""관계 토글 서비스 — 구독 및 좋아요 토글.

Relationship Toggle Service — One toggle operation shared by subscriptions
and the three like kinds.

The edge for ``(subject, target, kind)`` is deleted when present and
inserted when absent. Two concurrent toggles can both see "absent"; the
unique constraint makes the second insert fail, and that failure is
reported as ``active`` (already activated concurrently) instead of an error.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.relationship import RelationshipEdge, RelationshipKind
from vidtube.repositories.base import BaseRepository
from vidtube.repositories.content_repository import (
    comment_repository,
    tweet_repository,
    video_repository,
)
from vidtube.repositories.relationship_repository import relationship_repository
from vidtube.repositories.user_repository import user_repository
from vidtube.schemas.relationship import EdgeResponse, EdgeState, ToggleResponse
from vidtube.utils.exceptions import InternalError, NotFoundError
from vidtube.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

# 종류별 대상 레포지토리와 이름 — Target repository and label per kind
_TARGETS: dict[RelationshipKind, tuple[BaseRepository, str]] = {
    RelationshipKind.SUBSCRIPTION: (user_repository, "channel"),
    RelationshipKind.LIKE_VIDEO: (video_repository, "video"),
    RelationshipKind.LIKE_COMMENT: (comment_repository, "comment"),
    RelationshipKind.LIKE_TWEET: (tweet_repository, "tweet"),
}


class RelationshipService:
    """관계 토글 비즈니스 로직."""

    async def toggle(
        self,
        db: AsyncSession,
        subject_id: UUID,
        target_id: str,
        kind: RelationshipKind,
    ) -> ToggleResponse:
        """관계 엣지를 활성/비활성으로 전환합니다.

        Flip the edge for ``(subject_id, target_id, kind)``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            subject_id: 인증된 호출자 ID (Authenticated caller)
            target_id: 대상 ID 원본 문자열 (Raw target id from the path)
            kind: 관계 종류 (Relationship kind)

        Returns:
            ToggleResponse: 토글 이후 상태 (State after the toggle)

        Raises:
            ValidationError: 대상 ID 형식 오류 (Malformed target id)
            NotFoundError: 대상이 존재하지 않음 (Target does not exist)
        """
        repository, label = _TARGETS[kind]
        target_uuid: UUID = parse_uuid(target_id, f"{label} ID")

        if await repository.get_by_id(db, target_uuid) is None:
            raise NotFoundError(f"{label.capitalize()} not found")

        existing: RelationshipEdge | None = await relationship_repository.get_edge(
            db, subject_id, target_uuid, kind
        )
        if existing is not None:
            await relationship_repository.delete_edge(db, subject_id, target_uuid, kind)
            return ToggleResponse(state=EdgeState.INACTIVE, edge=None, created=False)

        try:
            edge: RelationshipEdge = await relationship_repository.create_edge(
                db, subject_id, target_uuid, kind
            )
        except IntegrityError:
            # 동시 토글이 먼저 생성함 — A concurrent toggle inserted the same tuple first
            logger.info(
                "Edge already activated concurrently",
                extra={"user_id": subject_id, "target_id": target_uuid, "kind": kind.value},
            )
            current: RelationshipEdge | None = await relationship_repository.get_edge(
                db, subject_id, target_uuid, kind
            )
            if current is None:
                raise InternalError("Failed to update relationship")
            return ToggleResponse(
                state=EdgeState.ACTIVE,
                edge=EdgeResponse.model_validate(current),
                created=False,
            )

        return ToggleResponse(
            state=EdgeState.ACTIVE,
            edge=EdgeResponse.model_validate(edge),
            created=True,
        )


# 싱글턴 인스턴스 — Singleton instance
relationship_service: RelationshipService = RelationshipService()
