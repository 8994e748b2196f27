"""
role.py

관리자 역할(Role) 모델 정의 파일.

관리자 계정은 하나 이상의 역할을 가지며,
역할은 code 값으로 식별한다.

기본 역할:
- super-admin : 최고 관리자 (회원 관리 쓰기 권한, 최소 1명 유지)
- editor      : 편집자
- author      : 작성자

"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Role(Base):
    __tablename__ = "admin_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
