import logging

from app.celery_app import celery_app

logger = logging.getLogger(__name__)


def describe_event(event_type: str, payload: dict) -> tuple[str, str]:
    """Return ``(audit type, action sentence)`` for a domain event."""
    number = payload.get("number")
    if event_type == "numbers.reserved":
        numbers = payload.get("numbers") or []
        return "document", (
            f"Reserved {len(numbers)} document number(s): {', '.join(numbers)}"
        )
    if event_type == "number.generated":
        return "document", f"Generated new document number {number}"
    if event_type == "reservation.deleted":
        return "document", f"Deleted reserved number {number}"
    if event_type == "document.registered":
        return "document", (
            f"Registered new {payload.get('type')} document #{number} "
            f'titled "{payload.get("title")}"'
        )
    if event_type == "document.updated":
        return "document", f"Updated document #{number}"
    if event_type == "document.deleted":
        return "document", f"Deleted document #{number}"
    if event_type == "person.created":
        return "auth", (
            f"Created new {payload.get('role')} account for {payload.get('email')}"
        )
    if event_type == "person.updated":
        return "auth", f"Updated user profile for {payload.get('email')}"
    if event_type == "person.deleted":
        return "auth", f"Deleted user account {payload.get('email')}"
    return "system", f"{event_type} {payload}"


@celery_app.task(name="app.tasks.events.process_event", ignore_result=True)
def process_event(
    event_type: str,
    entity_type: str,
    entity_id: str,
    actor_id: str | None = None,
    payload: dict | None = None,
) -> None:
    """Append the audit trail entry for a registry event.

    Events without a known actor are dropped; audit failures never propagate.
    """
    from app.db import SessionLocal
    from app.models.audit import AuditLogType
    from app.models.person import Person
    from app.services.audit_log import AuditLogs
    from app.services.common import coerce_uuid

    logger.info("Processing event %s for %s/%s", event_type, entity_type, entity_id)
    if not actor_id:
        logger.debug("Event %s has no actor; skipping audit entry", event_type)
        return

    db = SessionLocal()
    try:
        actor = db.get(Person, coerce_uuid(actor_id))
        if not actor:
            logger.warning("Actor %s for event %s not found", actor_id, event_type)
            return
        log_type, action = describe_event(event_type, payload or {})
        AuditLogs.record(db, action, AuditLogType(log_type), actor)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to record audit entry for %s: %s", event_type, e)
    finally:
        db.close()
