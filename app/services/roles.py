"""
services/roles.py

관리자 역할(Role) 관련 비즈니스 로직(Service) 모음.

이 파일은 회원 관리 기능에서 공통으로 사용되는
역할 조회 및 SUPER ADMIN 집계 로직을 담당한다.

주요 기능:
- SUPER ADMIN 역할과 활성(탈퇴하지 않은) 보유자 수 조회
- 특정 id 목록 중 SUPER ADMIN 수 계산
- 역할 id 목록 -> Role 객체 변환

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 탈퇴(deleted_at IS NOT NULL) 계정은 집계에서 제외
- 마지막 SUPER ADMIN 보호 로직에서 사용

관련 파일:
- app.models.role        : Role 모델
- app.services.users     : 회원 관리 서비스

"""

import uuid
from typing import Iterable

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.role import Role
from app.models.user import User


def is_super_admin(user: User) -> bool:
    return any(role.code == settings.SUPER_ADMIN_ROLE_CODE for role in user.roles)


def get_super_admin_role(db: Session) -> Role | None:
    return db.scalar(select(Role).where(Role.code == settings.SUPER_ADMIN_ROLE_CODE))


def _count_active_super_admins(db: Session, ids: Iterable[uuid.UUID] | None = None) -> int:
    stmt = (
        select(func.count(distinct(User.id)))
        .select_from(User)
        .join(User.roles)
        .where(Role.code == settings.SUPER_ADMIN_ROLE_CODE, User.deleted_at.is_(None))
    )
    if ids is not None:
        stmt = stmt.where(User.id.in_(list(ids)))
    return db.scalar(stmt) or 0


"""
SUPER ADMIN 역할과 활성 보유자 수를 반환

- 역할이 아직 없으면 (None, 0)

"""

def get_super_admin_with_users_count(db: Session) -> tuple[Role | None, int]:
    role = get_super_admin_role(db)
    if role is None:
        return None, 0
    return role, _count_active_super_admins(db)


# ids 중 탈퇴하지 않은 SUPER ADMIN 수
def count_super_admins_in(db: Session, ids: Iterable[uuid.UUID]) -> int:
    return _count_active_super_admins(db, ids)


def find_roles_by_ids(db: Session, ids: Iterable[uuid.UUID]) -> list[Role]:
    ids = list(dict.fromkeys(ids))
    if not ids:
        return []
    return list(db.scalars(select(Role).where(Role.id.in_(ids))).all())
