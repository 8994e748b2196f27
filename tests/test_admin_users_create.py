"""
관리자 계정 생성 API 테스트.
- 정상 생성(201, 비활성 + 초대 토큰, 민감 정보 미포함)
- 활성 계정과 이메일 중복 시 400 + 계정 미생성
- 탈퇴 계정의 이메일은 재사용 가능
- 입력 검증 실패 / 존재하지 않는 역할
"""

import uuid

from sqlalchemy import func, select

from app.models.admin_log import AdminAction, AdminActionLog
from app.models.user import User
from tests.helpers import auth_header, create_user_in_db, setup_roles_and_super_admin


def _payload(ctx, **overrides):
    body = {
        "email": f"new_{uuid.uuid4().hex[:6]}@test.com",
        "firstname": "길동",
        "lastname": "홍",
        "roles": [str(ctx["editor_role"].id)],
        "preferedLanguage": "ko",
    }
    body.update(overrides)
    return body


def _count_users(db, email):
    db.expire_all()
    return db.scalar(select(func.count()).select_from(User).where(User.email == email))


def test_create_user(client, db):
    ctx = setup_roles_and_super_admin(db)
    body = _payload(ctx, email="NewAdmin@Test.com")

    r = client.post("/admin/users", json=body, headers=auth_header(ctx["token"]))
    assert r.status_code == 201, r.text

    data = r.json()["data"]
    assert data["email"] == "newadmin@test.com"
    assert data["firstname"] == "길동"
    assert data["preferedLanguage"] == "ko"
    assert data["isActive"] is False
    assert len(data["registrationToken"]) == 40
    assert [role["code"] for role in data["roles"]] == ["editor"]
    assert data["deletedAt"] is None

    # 민감 정보는 응답에 없어야 함
    assert "password_hash" not in data
    assert "passwordHash" not in data
    assert "password" not in data
    assert "reset_password_token" not in data

    # 관리자 행위 로그
    db.expire_all()
    log = db.scalar(select(AdminActionLog).where(AdminActionLog.target_user_id == uuid.UUID(data["id"])))
    assert log is not None
    assert log.action == AdminAction.CREATE_USER
    assert log.actor_id == ctx["super_admin"].id


def test_create_duplicate_email_rejected(client, db):
    ctx = setup_roles_and_super_admin(db)
    create_user_in_db(db, email="taken@test.com", roles=[ctx["editor_role"]])

    r = client.post(
        "/admin/users",
        json=_payload(ctx, email="TAKEN@test.com"),
        headers=auth_header(ctx["token"]),
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already taken"
    assert _count_users(db, "taken@test.com") == 1


def test_create_reuses_email_of_deleted_user(client, db):
    ctx = setup_roles_and_super_admin(db)
    create_user_in_db(db, email="gone@test.com", roles=[ctx["editor_role"]], deleted=True)

    r = client.post(
        "/admin/users",
        json=_payload(ctx, email="gone@test.com"),
        headers=auth_header(ctx["token"]),
    )
    assert r.status_code == 201, r.text
    assert _count_users(db, "gone@test.com") == 2


def test_create_validation_errors(client, db):
    ctx = setup_roles_and_super_admin(db)
    headers = auth_header(ctx["token"])

    # 이메일 형식 오류
    r = client.post("/admin/users", json=_payload(ctx, email="not-an-email"), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "ValidationError"

    # 역할 없음
    r = client.post("/admin/users", json=_payload(ctx, roles=[]), headers=headers)
    assert r.status_code == 400

    # 필수 필드 누락
    body = _payload(ctx)
    del body["firstname"]
    r = client.post("/admin/users", json=body, headers=headers)
    assert r.status_code == 400

    # 알 수 없는 필드
    r = client.post("/admin/users", json=_payload(ctx, password="Passw0rd!!"), headers=headers)
    assert r.status_code == 400


def test_create_with_unknown_role_rejected(client, db):
    ctx = setup_roles_and_super_admin(db)
    body = _payload(ctx, email="norole@test.com", roles=[str(uuid.uuid4())])

    r = client.post("/admin/users", json=body, headers=auth_header(ctx["token"]))
    assert r.status_code == 400
    assert r.json()["detail"] == "Some roles do not exist"
    assert _count_users(db, "norole@test.com") == 0
