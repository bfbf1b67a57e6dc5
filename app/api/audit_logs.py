from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.audit import AuditLogCreate, AuditLogRead
from app.schemas.person import CurrentUser
from app.services.audit_log import audit_logs
from app.services.auth_dependencies import require_role, require_user_auth

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get(
    "",
    response_model=list[AuditLogRead],
    dependencies=[Depends(require_role("admin"))],
)
def list_logs(
    limit: int = Query(default=1000, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    return audit_logs.list(db, limit)


@router.post("", response_model=AuditLogRead, status_code=status.HTTP_201_CREATED)
def add_log(
    payload: AuditLogCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return audit_logs.record(db, payload.action, payload.type, current_user)
