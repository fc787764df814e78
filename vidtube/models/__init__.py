"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 계정 (User accounts / channels)
    token: 리프레시 세션 (Single refresh-token slot per account)
    content: 영상, 댓글, 트윗 (Videos, comments, tweets)
    relationship: 구독/좋아요 엣지 (Subscription and like edges)
"""

from vidtube.models.user import User
from vidtube.models.token import RefreshSession
from vidtube.models.content import Video, Comment, Tweet
from vidtube.models.relationship import RelationshipEdge, RelationshipKind

__all__ = [
    "User",
    "RefreshSession",
    "Video", "Comment", "Tweet",
    "RelationshipEdge", "RelationshipKind",
]
