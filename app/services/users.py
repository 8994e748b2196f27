"""
services/users.py

관리자 계정(User) 관리 비즈니스 로직(Service) 모음.

이 파일은 회원 관리 API에서 사용하는
조회 / 생성 / 수정 / 삭제(Soft Delete) 규칙을 담당한다.
라우터는 이 파일의 함수를 호출하여
검증/정책 판단 결과를 받아 응답만 처리한다.

주요 기능:
- 이메일 중복 확인 (탈퇴 계정 제외)
- 계정 생성 (초대 토큰 발급, 비활성 상태로 시작)
- 페이지 단위 목록 조회 / 검색
- 계정 수정 (비밀번호 해싱, 마지막 SUPER ADMIN 보호)
- 단건 / 다건 Soft Delete
- 응답용 계정 정보 정제(sanitize)

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 정책 위반은 ValueError, 대상 없음은 None 으로 표현
- 트랜잭션 제어(commit/rollback)는 라우터에서 수행 (여기서는 flush까지만)
- 탈퇴 계정(deleted_at IS NOT NULL)은 기본적으로 모든 조회에서 제외

관련 파일:
- app.models.user        : User 모델
- app.services.roles     : SUPER ADMIN 집계
- app.routers.admin_users : 회원 관리 API

"""

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import create_registration_token, get_password_hash
from app.models.role import Role
from app.models.user import User
from app.schemas.user import UserResponse
from app.services.roles import (
    count_super_admins_in,
    find_roles_by_ids,
    get_super_admin_with_users_count,
    is_super_admin,
)

logger = logging.getLogger(__name__)

LAST_SUPER_ADMIN_MESSAGE = "You must have at least one user with super admin role."

# _sort 파라미터에서 허용하는 필드 -> 컬럼
SORTABLE_FIELDS = {
    "firstname": User.firstname,
    "lastname": User.lastname,
    "username": User.username,
    "email": User.email,
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
}


def _active():
    return User.deleted_at.is_(None)


"""
이메일 중복 확인

- 탈퇴하지 않은 계정만 비교
- exclude_id 가 주어지면 해당 계정은 제외 (본인 이메일 유지 허용)

"""

def exists(db: Session, *, email: str, exclude_id: uuid.UUID | None = None) -> bool:
    stmt = select(func.count()).select_from(User).where(
        func.lower(User.email) == email.lower(),
        _active(),
    )
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return (db.scalar(stmt) or 0) > 0


def _resolve_roles(db: Session, role_ids: Iterable[uuid.UUID]) -> list[Role]:
    role_ids = list(dict.fromkeys(role_ids))
    roles = find_roles_by_ids(db, role_ids)
    if len(roles) != len(role_ids):
        raise ValueError("Some roles do not exist")
    return roles


"""
관리자 계정 생성

- 지정된 역할이 모두 존재해야 함
- 초대용 registration_token 발급, is_active=False 로 시작
- 생성 즉시 DB flush 수행

"""

def create_user(
    db: Session,
    *,
    firstname: str,
    lastname: str,
    email: str,
    roles: list[uuid.UUID],
    prefered_language: str | None = None,
) -> User:
    user = User(
        firstname=firstname,
        lastname=lastname,
        email=email.lower(),
        prefered_language=prefered_language,
        roles=_resolve_roles(db, roles),
        registration_token=create_registration_token(),
        is_active=False,
        blocked=False,
    )
    db.add(user)
    db.flush()
    return user


def parse_sort(sort: str | None):
    # "field:ASC" / "field:DESC" / "field" 형식
    if not sort:
        return [asc(User.created_at), asc(User.email)]

    field, _, direction = sort.partition(":")
    column = SORTABLE_FIELDS.get(field.strip())
    if column is None:
        raise ValueError(f"Cannot sort by '{field}'")

    direction = (direction or "ASC").strip().upper()
    if direction not in ("ASC", "DESC"):
        raise ValueError("Sort direction must be ASC or DESC")

    order = asc(column) if direction == "ASC" else desc(column)
    return [order, asc(User.id)]


def _apply_filters(stmt, filters: dict[str, Any]):
    if filters.get("firstname") is not None:
        stmt = stmt.where(User.firstname == filters["firstname"])
    if filters.get("lastname") is not None:
        stmt = stmt.where(User.lastname == filters["lastname"])
    if filters.get("email") is not None:
        stmt = stmt.where(func.lower(User.email) == filters["email"].lower())
    if filters.get("is_active") is not None:
        stmt = stmt.where(User.is_active.is_(filters["is_active"]))
    if filters.get("role") is not None:
        stmt = stmt.where(User.roles.any(Role.id == filters["role"]))
    return stmt


def _paginate(db: Session, stmt, *, page: int, page_size: int, sort: str | None):
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    results = db.scalars(
        stmt.order_by(*parse_sort(sort))
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()

    pagination = {
        "page": page,
        "pageSize": page_size,
        "pageCount": math.ceil(total / page_size) if total else 0,
        "total": total,
    }
    return list(results), pagination


"""
페이지 단위 목록 조회

- 탈퇴 계정 제외
- filters: firstname / lastname / email / is_active / role
- 반환: (results, pagination)

"""

def find_page(
    db: Session,
    *,
    filters: dict[str, Any] | None = None,
    page: int = 1,
    page_size: int = 10,
    sort: str | None = None,
):
    stmt = _apply_filters(select(User).where(_active()), filters or {})
    return _paginate(db, stmt, page=page, page_size=page_size, sort=sort)


"""
검색 목록 조회

- 이름 / 성 / username / email 에 대해 대소문자 무시 부분 일치
- 빈 검색어는 전체 목록과 동일
- 탈퇴 계정 제외

"""

def search_page(
    db: Session,
    *,
    q: str,
    filters: dict[str, Any] | None = None,
    page: int = 1,
    page_size: int = 10,
    sort: str | None = None,
):
    stmt = select(User).where(_active())
    if q:
        # % / _ 는 와일드카드가 아닌 문자로 검색
        escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        stmt = stmt.where(
            or_(
                User.firstname.ilike(pattern, escape="\\"),
                User.lastname.ilike(pattern, escape="\\"),
                User.username.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )
        )
    stmt = _apply_filters(stmt, filters or {})
    return _paginate(db, stmt, page=page, page_size=page_size, sort=sort)


def find_one(db: Session, user_id: uuid.UUID) -> User | None:
    return db.scalar(select(User).where(User.id == user_id, _active()))


# 해당 계정이 남은 유일한 SUPER ADMIN 인지
def is_last_super_admin_user(db: Session, user: User) -> bool:
    if not is_super_admin(user):
        return False
    _, users_count = get_super_admin_with_users_count(db)
    return users_count == 1


"""
계정 수정

- 대상이 없거나 탈퇴 계정이면 None
- 마지막 SUPER ADMIN 에게서 역할을 빼거나 비활성화하면 ValueError
- password 는 해시로 저장
- 이메일 중복 확인은 라우터에서 수행

"""

def update_by_id(db: Session, user_id: uuid.UUID, attributes: dict[str, Any]) -> User | None:
    user = find_one(db, user_id)
    if not user:
        return None

    attributes = dict(attributes)

    if "roles" in attributes:
        roles = _resolve_roles(db, attributes.pop("roles"))
        keeps_super_admin = any(r.code == settings.SUPER_ADMIN_ROLE_CODE for r in roles)
        if not keeps_super_admin and is_last_super_admin_user(db, user):
            raise ValueError(LAST_SUPER_ADMIN_MESSAGE)
        user.roles = roles

    if attributes.get("is_active") is False and is_last_super_admin_user(db, user):
        raise ValueError(LAST_SUPER_ADMIN_MESSAGE)

    if "password" in attributes:
        user.password_hash = get_password_hash(attributes.pop("password"))

    if "email" in attributes:
        attributes["email"] = attributes["email"].lower()

    for key, value in attributes.items():
        setattr(user, key, value)

    db.flush()
    return user


def _mark_deleted(user: User, deleted_by: uuid.UUID | None, now: datetime) -> None:
    user.deleted_at = now
    user.deleted_by = deleted_by


"""
단건 Soft Delete

- 대상이 없거나 이미 탈퇴한 계정이면 None
- 마지막 SUPER ADMIN 은 삭제 불가 (ValueError)

"""

def delete_by_id(db: Session, user_id: uuid.UUID, *, deleted_by: uuid.UUID | None) -> User | None:
    user = find_one(db, user_id)
    if not user:
        return None

    if is_last_super_admin_user(db, user):
        raise ValueError(LAST_SUPER_ADMIN_MESSAGE)

    _mark_deleted(user, deleted_by, datetime.now(timezone.utc))
    db.flush()
    return user


"""
다건 Soft Delete

- 중복 id 는 하나로 취급, 존재하지 않거나 이미 탈퇴한 id 는 건너뜀
- 남은 SUPER ADMIN 전원이 포함되면 전체 요청 거부 (ValueError)
- 모든 계정을 순서대로 처리한 뒤 결과 목록을 반환

"""

def delete_by_ids(db: Session, ids: Iterable[uuid.UUID], *, deleted_by: uuid.UUID | None) -> list[User]:
    ids = list(dict.fromkeys(ids))

    _, super_admin_count = get_super_admin_with_users_count(db)
    to_delete = count_super_admins_in(db, ids)
    if to_delete > 0 and to_delete >= super_admin_count:
        raise ValueError(LAST_SUPER_ADMIN_MESSAGE)

    now = datetime.now(timezone.utc)
    deleted = []
    for user_id in ids:
        user = find_one(db, user_id)
        if not user:
            logger.info("batch delete skipped missing user %s", user_id)
            continue
        _mark_deleted(user, deleted_by, now)
        deleted.append(user)

    db.flush()
    return deleted


# 응답용 계정 정보 (비밀번호 해시 / 재설정 토큰 제외)
def sanitize_user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json", by_alias=True)
