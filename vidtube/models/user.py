"""사용자(계정) SQLAlchemy ORM 모델 정의.

User (account) SQLAlchemy ORM model definition.
An account is both a login identity and a channel that other accounts
can subscribe to.

Tables:
    - users: 사용자 계정 (User accounts with unique username/email)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Username and email are stored lower-cased and are globally unique.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 / 채널 핸들 (Login username and channel handle)
        email: 이메일 (Email address, also usable as login identifier)
        full_name: 실명 (Full display name)
        avatar: 아바타 이미지 URL (Avatar image URL)
        cover_image: 커버 이미지 URL (Cover image URL, optional)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        is_active: 활성 상태 (Active status, soft-delete pattern)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_session: 현재 리프레시 세션 (Current refresh session, at most one)
        videos: 업로드한 영상 목록 (Videos owned by this channel)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username (전역 고유, globally unique, lower-cased)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    # 이메일 — Email address (전역 고유, globally unique, lower-cased)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 아바타 — Avatar image URL (외부 저장소 업로드 결과, result of third-party upload)
    avatar: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    # 커버 이미지 — Cover image URL
    cover_image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_session = relationship("RefreshSession", back_populates="user", uselist=False, cascade="all, delete-orphan")
    videos = relationship("Video", back_populates="owner", cascade="all, delete-orphan")
