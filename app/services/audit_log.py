import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.models.audit import AuditLog, AuditLogType
from app.models.person import Person
from app.schemas.person import CurrentUser

logger = logging.getLogger(__name__)


class AuditLogs:
    @staticmethod
    def record(
        db: Session,
        action: str,
        log_type: AuditLogType,
        actor: Person | CurrentUser,
    ) -> AuditLog:
        role = getattr(actor.role, "value", actor.role)
        entry = AuditLog(
            action=action,
            type=log_type,
            actor_id=actor.id,
            actor_name=actor.name,
            actor_email=actor.email,
            actor_role=role,
            actor_department=actor.department,
        )
        db.add(entry)
        db.flush()
        db.refresh(entry)
        logger.debug("Recorded %s audit entry: %s", log_type.value, action)
        return entry

    @staticmethod
    def list(db: Session, limit: int | None = None) -> list[AuditLog]:
        cap = settings.audit_log_list_limit
        limit = min(limit or cap, cap)
        stmt = select(AuditLog).order_by(AuditLog.timestamp.desc()).limit(limit)
        return db.scalars(stmt).all()


audit_logs = AuditLogs()
