"""Sequential document number allocation.

Documents and reservations share one numbering namespace. New numbers come
from a persisted per-namespace sequence row which is locked for the duration
of the allocating transaction, cross-checked against the highest number found
in either table (ad-hoc registrations can jump ahead of the sequence) and
re-verified for existence before being handed out.
"""

from __future__ import annotations

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import NumberConflict
from app.models.registry import Document, DocumentType, NumberSequence, Reservation
from app.observability import NUMBER_CONFLICTS, NUMBERS_ALLOCATED
from app.schemas.person import CurrentUser
from app.services.event import EventType, publish_event

logger = logging.getLogger(__name__)


def parse_number(value: str | None) -> int:
    """Integer value of a stored number; anything unparseable counts as 0."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def format_number(value: int) -> str:
    return str(value).zfill(settings.number_min_width)


def normalize_number(value: str) -> str:
    """Trim a submitted number; all-digit numbers get the canonical padding."""
    number = value.strip()
    if number.isascii() and number.isdigit():
        return format_number(int(number))
    return number


class NumberAllocator:
    @staticmethod
    def seed_sequence(db: Session) -> None:
        name = settings.number_sequence_name
        if db.get(NumberSequence, name) is None:
            db.add(NumberSequence(name=name, last_value=0))
            db.commit()
            logger.info("Seeded number sequence %s", name)

    @staticmethod
    def _lock_sequence(db: Session) -> NumberSequence:
        name = settings.number_sequence_name
        stmt = (
            select(NumberSequence)
            .where(NumberSequence.name == name)
            .with_for_update()
        )
        sequence = db.scalar(stmt)
        if sequence is not None:
            return sequence

        sequence = NumberSequence(name=name, last_value=0)
        try:
            db.add(sequence)
            db.flush()
        except IntegrityError:
            # Another request created the row first.
            db.rollback()
            NUMBER_CONFLICTS.inc()
            raise NumberConflict()
        return sequence

    @staticmethod
    def highest_allocated(db: Session) -> int:
        numbers = list(db.scalars(select(Document.number)))
        numbers.extend(db.scalars(select(Reservation.number)))
        return max([0, *(parse_number(n) for n in numbers)])

    @staticmethod
    def number_exists(db: Session, number: str) -> bool:
        return bool(
            db.scalar(select(exists().where(Document.number == number)))
            or db.scalar(select(exists().where(Reservation.number == number)))
        )

    @staticmethod
    def next_number(db: Session, purpose: str = "reservation") -> str:
        """Claim the next number in the namespace.

        The sequence row stays locked until the caller's transaction ends, so
        callers should commit promptly. Raises ``NumberConflict`` when the
        candidate is already taken; the caller may retry.
        """
        sequence = NumberAllocator._lock_sequence(db)
        current = max(sequence.last_value, NumberAllocator.highest_allocated(db))
        candidate = format_number(current + 1)

        if NumberAllocator.number_exists(db, candidate):
            NUMBER_CONFLICTS.inc()
            logger.warning("Number %s already allocated, rejecting", candidate)
            raise NumberConflict()

        sequence.last_value = current + 1
        db.flush()
        NUMBERS_ALLOCATED.labels(purpose).inc()
        logger.debug("Allocated number %s (%s)", candidate, purpose)
        return candidate

    @staticmethod
    def generate_number(
        db: Session, doc_type: DocumentType, actor: CurrentUser | None = None
    ) -> str:
        """Hand out a number for immediate registration, without a reservation."""
        number = NumberAllocator.next_number(db, purpose="generated")
        logger.info("Generated %s number %s", doc_type.value, number)
        if actor is not None:
            publish_event(
                EventType.number_generated,
                entity_type="number",
                entity_id=number,
                actor_id=actor.id,
                payload={"number": number, "type": doc_type.value},
            )
        return number


allocator = NumberAllocator()
