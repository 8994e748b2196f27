"""
앱 공통 동작 테스트.
- 헬스 체크 / DB ping
- 인증 누락 / 잘못된 토큰 / 권한 부족
- 요청 검증 오류가 400 ValidationError 로 변환되는지
"""

import uuid

from tests.helpers import auth_header, create_user_in_db, setup_roles_and_super_admin, token_for


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1


def test_admin_routes_require_token(client):
    r = client.get("/admin/users")
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"


def test_invalid_token_rejected(client):
    r = client.get("/admin/users", headers=auth_header("not-a-jwt"))
    assert r.status_code == 401
    assert r.json()["detail"] == "Could not validate credentials"


def test_deleted_admin_token_rejected(client, db):
    ctx = setup_roles_and_super_admin(db)
    gone = create_user_in_db(db, roles=[ctx["editor_role"]], deleted=True)

    r = client.get("/admin/users", headers=auth_header(token_for(gone)))
    assert r.status_code == 401


def test_inactive_admin_forbidden(client, db):
    ctx = setup_roles_and_super_admin(db)
    pending = create_user_in_db(db, roles=[ctx["super_admin_role"]], is_active=False)

    r = client.get("/admin/users", headers=auth_header(token_for(pending)))
    assert r.status_code == 403
    assert r.json()["detail"] == "Inactive user"


def test_editor_can_read_but_not_write(client, db):
    ctx = setup_roles_and_super_admin(db)
    editor = create_user_in_db(db, roles=[ctx["editor_role"]])
    headers = auth_header(token_for(editor))

    r = client.get("/admin/users", headers=headers)
    assert r.status_code == 200, r.text

    r = client.post(
        "/admin/users",
        headers=headers,
        json={
            "email": "new@test.com",
            "firstname": "New",
            "lastname": "User",
            "roles": [str(ctx["editor_role"].id)],
        },
    )
    assert r.status_code == 403
    assert r.json()["detail"] == "Requires super admin role"


def test_validation_error_is_400(client, db):
    ctx = setup_roles_and_super_admin(db)

    r = client.get("/admin/users/not-a-uuid", headers=auth_header(ctx["token"]))
    assert r.status_code == 400
    body = r.json()
    assert body["detail"] == "ValidationError"
    assert body["errors"][0]["loc"] == ["path", "user_id"]


def test_unknown_user_is_404(client, db):
    ctx = setup_roles_and_super_admin(db)

    r = client.get(f"/admin/users/{uuid.uuid4()}", headers=auth_header(ctx["token"]))
    assert r.status_code == 404
    assert r.json()["detail"] == "User does not exist"
