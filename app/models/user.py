"""
user.py

관리자 계정(User) 모델 정의 파일.

이 파일은 관리자 페이지 사용자의 기본 정보와
역할(Role) 연결, 탈퇴 상태(Soft Delete), 초대/인증 관련 정보를 관리한다.

모든 회원 관리 API의 기준이 되는 핵심 모델이다.

"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Table, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.role import Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 사용자 <-> 역할 N:M 연결 테이블
admin_users_roles = Table(
    "admin_users_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("admin_users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("admin_roles.id", ondelete="CASCADE"), primary_key=True),
)


"""
관리자 계정(User) 모델

- email 은 탈퇴하지 않은(deleted_at IS NULL) 계정 사이에서만 고유
- roles 를 통해 접근 권한 제어
- deleted_at / deleted_by 로 Soft Delete 지원
- 관리자가 생성한 계정은 registration_token 을 가진 비활성 상태로 시작

"""

class User(Base):
    __tablename__ = "admin_users"
    __table_args__ = (
        Index(
            "uq_admin_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    firstname: Mapped[str] = mapped_column(String(100), nullable=False)
    lastname: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)

    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    reset_password_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_token: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    prefered_language: Mapped[str | None] = mapped_column(String(20), nullable=True)

    roles: Mapped[list[Role]] = relationship(secondary=admin_users_roles, lazy="selectin")

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    deleted_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
