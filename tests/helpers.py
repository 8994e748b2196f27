# tests/helpers.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.config import settings
from app.core.security import create_access_token, get_password_hash
from app.models.role import Role
from app.models.user import User


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(user: User) -> str:
    return create_access_token(subject=str(user.id))


def create_role_in_db(db: Session, *, code: str, name: str | None = None) -> Role:
    role = Role(code=code, name=name or code.title())
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def create_user_in_db(
    db: Session,
    *,
    email: str | None = None,
    roles: list[Role] | None = None,
    firstname: str = "Test",
    lastname: str = "User",
    is_active: bool = True,
    deleted: bool = False,
) -> User:
    user = User(
        email=email or f"user_{uuid.uuid4().hex[:6]}@test.com",
        password_hash=get_password_hash("UserPassw0rd!"),
        firstname=firstname,
        lastname=lastname,
        is_active=is_active,
        roles=roles or [],
        deleted_at=datetime.now(timezone.utc) if deleted else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def setup_roles_and_super_admin(db: Session):
    """
    기본 역할(super-admin / editor) + 활성 SUPER ADMIN 1명 + 토큰 세팅
    """
    super_admin_role = create_role_in_db(db, code=settings.SUPER_ADMIN_ROLE_CODE, name="Super Admin")
    editor_role = create_role_in_db(db, code="editor", name="Editor")

    super_admin = create_user_in_db(
        db,
        email=f"superadmin_{uuid.uuid4().hex[:6]}@test.com",
        roles=[super_admin_role],
        firstname="Super",
        lastname="Admin",
    )

    return {
        "super_admin_role": super_admin_role,
        "editor_role": editor_role,
        "super_admin": super_admin,
        "token": token_for(super_admin),
    }


def get_user(db: Session, user_id) -> User:
    db.expire_all()
    if isinstance(user_id, str):
        user_id = uuid.UUID(user_id)
    return db.scalar(select(User).where(User.id == user_id))
