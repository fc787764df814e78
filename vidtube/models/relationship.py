"""관계 엣지 모델 — 구독 및 좋아요.

Relationship edge model — Subscriptions and likes share one table.
A row exists exactly while the relationship is active; the unique
constraint on (subject_id, target_id, kind) is what keeps concurrent
toggles from producing duplicate edges.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.database import Base


class RelationshipKind(str, enum.Enum):
    """관계 종류 — Closed set of edge kinds.

    The value is what is stored in the ``kind`` column and what clients
    put in the ``/toggle/{kind}/...`` path.
    """

    SUBSCRIPTION = "subscription"
    LIKE_VIDEO = "like-video"
    LIKE_COMMENT = "like-comment"
    LIKE_TWEET = "like-tweet"


class RelationshipEdge(Base):
    """관계 엣지 테이블.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        subject_id: 행위자 사용자 ID (Acting user: subscriber or liker)
        target_id: 대상 ID — 채널/영상/댓글/트윗 (Target channel, video, comment or tweet)
        kind: 관계 종류 (RelationshipKind value)
        created_at: 생성 일시 (Creation timestamp)

    Constraints:
        uq_edge_subject_target_kind: 튜플당 최대 하나의 엣지 (At most one edge per tuple)
        ix_edge_target_kind: 대상별 집계용 (Counts per target)
    """

    __tablename__ = "relationship_edges"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    subject_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # 대상은 종류에 따라 다른 테이블을 가리키므로 FK 없음
    # No FK: the target table depends on kind
    target_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("subject_id", "target_id", "kind", name="uq_edge_subject_target_kind"),
        Index("ix_edge_target_kind", "target_id", "kind"),
    )
