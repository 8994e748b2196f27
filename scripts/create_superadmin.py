"""

SUPER ADMIN 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- 기본 역할(super-admin / editor / author)이 없으면 생성한다.
- .env에 정의된 SUPERADMIN_* 환경 변수를 읽어
  SUPER ADMIN 계정을 생성한다.
- 이미 활성 SUPER ADMIN 계정이 존재하면 생성하지 않는다.
- 마지막에 해당 계정의 Access Token 을 출력한다.

사용 목적:
- 회원 관리 API(생성/수정/삭제)에 접근할 수 있는
  최상위 관리자 계정을 안전하게 초기화하기 위함

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_superadmin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.core.config import settings
from app.core.security import create_access_token, get_password_hash
from app.db.session import SessionLocal
from app.models.role import Role
from app.models.user import User


DEFAULT_ROLES = [
    (settings.SUPER_ADMIN_ROLE_CODE, "Super Admin", "Super Admins can access and manage all features and settings."),
    ("editor", "Editor", "Editors can manage and publish contents including those of other users."),
    ("author", "Author", "Authors can manage the content they have created."),
]


def ensure_roles(db) -> Role:
    for code, name, description in DEFAULT_ROLES:
        if not db.scalar(select(Role).where(Role.code == code)):
            db.add(Role(code=code, name=name, description=description))
            print(f"✅ role created: {code}")
    db.flush()
    return db.scalar(select(Role).where(Role.code == settings.SUPER_ADMIN_ROLE_CODE))


def main():
    db = SessionLocal()
    try:
        super_admin_role = ensure_roles(db)

        existing = db.scalar(
            select(User).where(
                User.roles.any(Role.id == super_admin_role.id),
                User.deleted_at.is_(None),
            )
        )
        if existing:
            db.commit()
            print("✅ SUPER ADMIN already exists. Skip creation.")
            print(f"🔑 access token: {create_access_token(subject=str(existing.id))}")
            return

        email = os.environ["SUPERADMIN_EMAIL"].lower()
        password = os.environ["SUPERADMIN_PASSWORD"]
        firstname = os.environ.get("SUPERADMIN_FIRSTNAME", "Super")
        lastname = os.environ.get("SUPERADMIN_LASTNAME", "Admin")

        email_exists = db.scalar(
            select(User).where(User.email == email, User.deleted_at.is_(None))
        )
        if email_exists:
            raise RuntimeError("Email already exists but is not SUPER ADMIN")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            firstname=firstname,
            lastname=lastname,
            is_active=True,
            roles=[super_admin_role],
        )

        db.add(user)
        db.commit()

        print(f"🚀 SUPER ADMIN created: {email}")
        print(f"🔑 access token: {create_access_token(subject=str(user.id))}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
