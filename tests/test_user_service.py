"""
services.users / services.roles 단위 테스트 (DB 세션 직접 사용).
"""

import pytest

from app.services import users as user_service
from app.services.roles import count_super_admins_in, get_super_admin_with_users_count
from tests.helpers import create_role_in_db, create_user_in_db, setup_roles_and_super_admin


def test_exists_ignores_deleted_and_excluded_users(db):
    ctx = setup_roles_and_super_admin(db)
    me = create_user_in_db(db, email="me@test.com", roles=[ctx["editor_role"]])
    create_user_in_db(db, email="old@test.com", roles=[ctx["editor_role"]], deleted=True)

    assert user_service.exists(db, email="ME@test.com") is True
    assert user_service.exists(db, email="me@test.com", exclude_id=me.id) is False
    assert user_service.exists(db, email="old@test.com") is False
    assert user_service.exists(db, email="nobody@test.com") is False


def test_super_admin_count_excludes_deleted(db):
    ctx = setup_roles_and_super_admin(db)
    deleted_super = create_user_in_db(db, roles=[ctx["super_admin_role"]], deleted=True)
    other_super = create_user_in_db(db, roles=[ctx["super_admin_role"], ctx["editor_role"]])

    role, count = get_super_admin_with_users_count(db)
    assert role.id == ctx["super_admin_role"].id
    assert count == 2

    assert count_super_admins_in(db, [deleted_super.id, other_super.id]) == 1


def test_super_admin_count_without_role(db):
    create_role_in_db(db, code="editor")
    assert get_super_admin_with_users_count(db) == (None, 0)


def test_create_user_starts_inactive_with_token(db):
    ctx = setup_roles_and_super_admin(db)

    user = user_service.create_user(
        db,
        firstname="A",
        lastname="B",
        email="Mixed@Test.com",
        roles=[ctx["editor_role"].id, ctx["editor_role"].id],
    )
    db.commit()

    assert user.email == "mixed@test.com"
    assert user.is_active is False
    assert user.password_hash is None
    assert len(user.registration_token) == 40
    assert [r.code for r in user.roles] == ["editor"]


def test_parse_sort():
    assert len(user_service.parse_sort(None)) == 2
    assert len(user_service.parse_sort("lastname")) == 2
    with pytest.raises(ValueError):
        user_service.parse_sort("password_hash:ASC")
    with pytest.raises(ValueError):
        user_service.parse_sort("email:UP")


def test_delete_by_ids_processes_every_id_before_returning(db):
    ctx = setup_roles_and_super_admin(db)
    users = [create_user_in_db(db, roles=[ctx["editor_role"]]) for _ in range(4)]

    deleted = user_service.delete_by_ids(db, [u.id for u in users], deleted_by=ctx["super_admin"].id)
    db.commit()

    assert [u.id for u in deleted] == [u.id for u in users]
    assert all(u.deleted_at is not None for u in deleted)


def test_delete_by_ids_without_super_admins_in_set(db):
    create_role_in_db(db, code="super-admin")
    editor_role = create_role_in_db(db, code="editor")
    user = create_user_in_db(db, roles=[editor_role])

    # SUPER ADMIN 이 한 명도 없는 상태에서도 일반 계정 삭제는 가능
    deleted = user_service.delete_by_ids(db, [user.id], deleted_by=None)
    assert [u.id for u in deleted] == [user.id]


def test_sanitize_user_strips_credentials(db):
    ctx = setup_roles_and_super_admin(db)
    user = ctx["super_admin"]
    user.reset_password_token = "secret-reset"
    db.commit()

    data = user_service.sanitize_user(user)
    assert data["email"] == user.email
    assert "password_hash" not in data
    assert "reset_password_token" not in data
    assert "resetPasswordToken" not in data
    assert "secret-reset" not in data.values()
    assert data["roles"][0]["code"] == "super-admin"
