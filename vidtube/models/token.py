"""리프레시 세션 모델 — 계정당 하나의 리프레시 토큰 식별자 저장.

Refresh Session model — Holds the single current refresh-token handle per account.
The row is keyed by the account id, so at most one refresh lineage exists
per account. Login and rotation overwrite ``token_id``; logout deletes the row.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base


class RefreshSession(Base):
    """리프레시 세션 테이블.

    Refresh session table, one row per logged-in account.

    Attributes:
        user_id: 소유 사용자 ID, 기본 키 (Owner user UUID, primary key)
        token_id: 현재 유효한 리프레시 토큰의 jti (jti of the only valid refresh token)
        expires_at: 리프레시 토큰 만료 일시 (Refresh token expiration timestamp)
        updated_at: 마지막 발급/회전 일시 (Last issue or rotation timestamp)
    """

    __tablename__ = "refresh_sessions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    token_id: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user = relationship("User", back_populates="refresh_session")
