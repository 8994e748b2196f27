"""
services/admin_log.py

관리자 행위 로그 기록 서비스.

이 파일은 관리자(Admin)가 수행한 회원 관리 행위를
AdminActionLog 테이블에 기록하는 역할을 담당한다.

라우터에서 호출되며,
로그 기록 자체는 DB에만 영향을 주고
비즈니스 흐름에는 개입하지 않는다.

설계 원칙:
- 로그는 실제 변경과 같은 트랜잭션에서 기록
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

from fastapi import Request
from sqlalchemy.orm import Session
from app.models.admin_log import AdminActionLog, AdminAction


"""
관리자 행위 로그 기록 함수

- actor_id       : 행위를 수행한 관리자 ID
- action         : 수행된 관리자 행위 유형
- target_user_id : 행위 대상 사용자 ID (선택)
- detail         : 변경 필드 등 부가 정보 (선택)
- ip             : 요청 IP 주소 (선택)
- user_agent     : 요청 User-Agent (선택)

NOTE:
- db.commit()은 호출 측(라우터)에서 수행

"""
def write_admin_log(
    db: Session,
    *,
    actor_id,
    action: AdminAction,
    target_user_id=None,
    detail=None,
    ip=None,
    user_agent=None,
):
    log = AdminActionLog(
        actor_id=actor_id,
        action=action,
        target_user_id=target_user_id,
        detail=detail[:255] if detail else None,
        ip=ip,
        user_agent=user_agent[:255] if user_agent else None,
    )
    db.add(log)
    return log


# 요청 객체에서 IP / User-Agent 추출
def request_meta(request: Request) -> dict:
    return {
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }
