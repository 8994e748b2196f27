"""
admin_users.py

관리자 계정(User) 관리 API 모음.

이 파일은 관리자 페이지 사용자에 대한
생성 / 목록 조회 / 단건 조회 / 수정 / 삭제 / 다건 삭제 기능을 담당한다.

주요 기능:
- 관리자 계정 생성 (이메일 중복 확인)
- 목록 조회 (_q 파라미터가 있으면 검색, 없으면 페이지 조회)
- 단건 조회 / 수정 / Soft Delete
- 다건 Soft Delete (마지막 SUPER ADMIN 보호)

설계 원칙:
- 조회는 관리자(get_current_admin), 변경은 SUPER ADMIN(get_current_super_admin)만 가능
- 비즈니스 로직은 service 계층(app.services.users)에 위임
- 이 라우터는 요청 검증 / 트랜잭션 / 응답 형태({"data": ...})에만 집중
- 응답에는 항상 sanitize_user 로 정제된 계정 정보만 포함

관련 파일:
- app.services.users       : 회원 관리 비즈니스 로직
- app.services.admin_log   : 관리자 행위 로그
- app.schemas.user         : 요청/응답 스키마 정의
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db, get_current_admin, get_current_super_admin
from app.models.admin_log import AdminAction
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UsersDelete
from app.services import users as user_service
from app.services.admin_log import request_meta, write_admin_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin-users"])


"""
관리자 계정 생성 API

- 탈퇴하지 않은 계정 중 같은 이메일이 있으면 400
- 생성된 계정은 비활성 상태 + 초대 토큰 보유
- 201 Created 와 함께 정제된 계정 정보 반환

"""
@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_super_admin),
):
    if user_service.exists(db, email=body.email):
        logger.info("create rejected: email %s already taken", body.email)
        raise HTTPException(status_code=400, detail="Email already taken")

    try:
        user = user_service.create_user(
            db,
            firstname=body.firstname,
            lastname=body.lastname,
            email=body.email,
            roles=body.roles,
            prefered_language=body.prefered_language,
        )
        write_admin_log(
            db,
            actor_id=admin.id,
            action=AdminAction.CREATE_USER,
            target_user_id=user.id,
            **request_meta(request),
        )
        db.commit()
        db.refresh(user)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already taken")
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("admin %s created user %s", admin.id, user.id)
    return {"data": user_service.sanitize_user(user)}


"""
관리자 계정 목록 조회 API

- _q 파라미터가 있으면 검색(search_page), 없으면 페이지 조회(find_page)
- 탈퇴 계정은 항상 제외
- page / pageSize (또는 _page / _pageSize) / _sort 로 페이지네이션 및 정렬

"""
@router.get("")
def find_users(
    q: Optional[str] = Query(None, alias="_q"),
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    legacy_page: Optional[int] = Query(None, alias="_page", ge=1),
    legacy_page_size: Optional[int] = Query(None, alias="_pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = Query(None, alias="_sort"),
    firstname: Optional[str] = None,
    lastname: Optional[str] = None,
    email: Optional[str] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    role: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    # page / pageSize 우선, 없으면 _page / _pageSize
    page = page or legacy_page or 1
    page_size = page_size or legacy_page_size or settings.DEFAULT_PAGE_SIZE

    filters = {
        "firstname": firstname,
        "lastname": lastname,
        "email": email,
        "is_active": is_active,
        "role": role,
    }

    try:
        if q is not None:
            results, pagination = user_service.search_page(
                db, q=q, filters=filters, page=page, page_size=page_size, sort=sort
            )
        else:
            results, pagination = user_service.find_page(
                db, filters=filters, page=page, page_size=page_size, sort=sort
            )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "data": {
            "results": [user_service.sanitize_user(u) for u in results],
            "pagination": pagination,
        }
    }


# 관리자 계정 단건 조회 API (탈퇴 계정은 404)
@router.get("/{user_id}")
def find_one_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    user = user_service.find_one(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User does not exist")

    return {"data": user_service.sanitize_user(user)}


"""
관리자 계정 수정 API (PUT / PATCH 모두 부분 수정)

- email 변경 시 다른 활성 계정과 중복되면 400 (본인 이메일은 허용)
- 마지막 SUPER ADMIN 의 역할 제거 / 비활성화는 400
- 대상이 없으면 404

"""
@router.api_route("/{user_id}", methods=["PUT", "PATCH"])
def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_super_admin),
):
    attributes = body.model_dump(exclude_unset=True)

    if "email" in attributes:
        if user_service.exists(db, email=attributes["email"], exclude_id=user_id):
            logger.info("update rejected: email %s already used", attributes["email"])
            raise HTTPException(status_code=400, detail="A user with this email address already exists")

    try:
        user = user_service.update_by_id(db, user_id, attributes)
        if not user:
            raise HTTPException(status_code=404, detail="User does not exist")

        write_admin_log(
            db,
            actor_id=admin.id,
            action=AdminAction.UPDATE_USER,
            target_user_id=user.id,
            detail=",".join(sorted(attributes)),
            **request_meta(request),
        )
        db.commit()
        db.refresh(user)
    except HTTPException:
        db.rollback()
        raise
    except ValueError as e:
        db.rollback()
        logger.info("update of user %s rejected: %s", user_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A user with this email address already exists")
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("admin %s updated user %s (%s)", admin.id, user.id, ",".join(sorted(attributes)))
    return {"data": user_service.sanitize_user(user)}


"""
관리자 계정 단건 삭제 API

- Soft Delete (deleted_at / deleted_by 기록)
- 마지막 SUPER ADMIN 은 삭제 불가 (400)
- 대상이 없으면 404

"""
@router.delete("/{user_id}")
def delete_user(
    user_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_super_admin),
):
    try:
        user = user_service.delete_by_id(db, user_id, deleted_by=admin.id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        write_admin_log(
            db,
            actor_id=admin.id,
            action=AdminAction.DELETE_USER,
            target_user_id=user.id,
            **request_meta(request),
        )
        db.commit()
        db.refresh(user)
    except HTTPException:
        db.rollback()
        raise
    except ValueError as e:
        db.rollback()
        logger.info("delete of user %s rejected: %s", user_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("admin %s deleted user %s", admin.id, user.id)
    return {"data": user_service.sanitize_user(user)}


"""
관리자 계정 다건 삭제 API

- body: {"ids": [...]}
- 남은 SUPER ADMIN 전원이 포함되면 400
- 모든 계정 처리가 끝난 뒤 삭제된 계정 목록을 반환

"""
@router.post("/batch-delete")
def delete_many_users(
    body: UsersDelete,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_super_admin),
):
    try:
        users = user_service.delete_by_ids(db, body.ids, deleted_by=admin.id)

        meta = request_meta(request)
        for user in users:
            write_admin_log(
                db,
                actor_id=admin.id,
                action=AdminAction.DELETE_USER,
                target_user_id=user.id,
                detail="batch",
                **meta,
            )
        db.commit()
        for user in users:
            db.refresh(user)
    except ValueError as e:
        db.rollback()
        logger.info("batch delete rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("admin %s deleted %d users", admin.id, len(users))
    return {"data": [user_service.sanitize_user(u) for u in users]}
