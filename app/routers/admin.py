from fastapi import APIRouter, Depends

from sqlalchemy.orm import Session, aliased
from sqlalchemy import select, desc

from app.core.deps import get_db, get_current_admin

from app.models.user import User
from app.models.admin_log import AdminActionLog



router = APIRouter(prefix="/admin", tags=["admin"])


# 관리자 활동 로그 조회 엔드포인트
@router.get("/logs")
def list_admin_logs(
    limit: int = 50,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    limit = max(1, min(limit, 200))

    Actor = aliased(User)
    Target = aliased(User)

    rows = db.execute(
        select(AdminActionLog, Actor, Target)
        .join(Actor, Actor.id == AdminActionLog.actor_id)
        .outerjoin(Target, Target.id == AdminActionLog.target_user_id)
        .order_by(desc(AdminActionLog.created_at))
        .limit(limit)
    ).all()

    result = []
    for log, actor, target in rows:
        result.append(
            {
                "id": str(log.id),
                "created_at": log.created_at.isoformat(),
                "action": log.action.value,
                "detail": log.detail,

                "actor": {
                    "id": str(actor.id),
                    "email": actor.email,
                    "firstname": actor.firstname,
                    "lastname": actor.lastname,
                },
                "target": (
                    {
                        "id": str(target.id),
                        "email": target.email,
                        "firstname": target.firstname,
                        "lastname": target.lastname,
                        "deleted": target.deleted_at is not None,
                    }
                    if target
                    else None
                ),
            }
        )
    return {
        "data": result,
        "meta": {
            "limit": limit,
            "count": len(result),
        },
    }
