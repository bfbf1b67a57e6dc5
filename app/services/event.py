import enum
import logging
import uuid

logger = logging.getLogger(__name__)


class EventType(enum.Enum):
    numbers_reserved = "numbers.reserved"
    number_generated = "number.generated"
    reservation_deleted = "reservation.deleted"

    document_registered = "document.registered"
    document_updated = "document.updated"
    document_deleted = "document.deleted"

    person_created = "person.created"
    person_updated = "person.updated"
    person_deleted = "person.deleted"


def publish_event(
    event_type: EventType,
    entity_type: str,
    entity_id: str | uuid.UUID,
    actor_id: str | uuid.UUID | None = None,
    payload: dict | None = None,
) -> None:
    """Fire-and-forget event publishing.

    Queues a Celery task that appends the audit trail entry.
    Never raises; failures are logged and dropped.
    """
    try:
        from app.tasks.events import process_event

        process_event.delay(
            event_type=event_type.value,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_id=str(actor_id) if actor_id else None,
            payload=payload or {},
        )
        logger.debug(
            "Published event %s for %s/%s", event_type.value, entity_type, entity_id
        )
    except Exception as e:
        logger.exception("Failed to publish event %s: %s", event_type.value, e)
