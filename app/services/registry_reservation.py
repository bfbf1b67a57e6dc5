from __future__ import annotations

import enum
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import NotFound, PermissionDenied, ValidationError
from app.models.registry import DocumentType, Reservation
from app.schemas.person import CurrentUser
from app.schemas.registry import ReservationRead
from app.services.common import coerce_uuid
from app.services.event import EventType, publish_event
from app.services.registry_numbering import NumberAllocator

logger = logging.getLogger(__name__)


class ReservationScope(enum.Enum):
    department = "department"
    owner = "owner"
    all = "all"


class Reservations:
    @staticmethod
    def reserve(
        db: Session,
        doc_type: DocumentType,
        actor: CurrentUser,
        count: int = 1,
    ) -> list[ReservationRead]:
        """Reserve ``count`` consecutive numbers for the actor's department.

        Every reservation is committed as soon as it is created. If a later
        iteration fails the call raises, but the earlier reservations stay.
        """
        max_batch = settings.reservation_max_batch
        if isinstance(count, bool) or not isinstance(count, int) or not (
            1 <= count <= max_batch
        ):
            raise ValidationError(
                f"Please provide a valid count between 1 and {max_batch}"
            )
        if not actor.department:
            raise ValidationError(
                "User department is not configured. Please contact administrator."
            )

        reserved: list[ReservationRead] = []
        try:
            for _ in range(count):
                number = NumberAllocator.next_number(db)
                reservation = Reservation(
                    number=number,
                    type=doc_type,
                    department=actor.department,
                    owner_id=actor.id,
                )
                db.add(reservation)
                db.flush()
                db.commit()
                db.refresh(reservation)
                reserved.append(ReservationRead.model_validate(reservation))
        except Exception:
            if reserved:
                logger.warning(
                    "Reservation batch aborted after %d of %d numbers; kept %s",
                    len(reserved),
                    count,
                    ", ".join(r.number for r in reserved),
                )
            raise
        finally:
            if reserved:
                publish_event(
                    EventType.numbers_reserved,
                    entity_type="reservation",
                    entity_id=reserved[0].id,
                    actor_id=actor.id,
                    payload={
                        "numbers": [r.number for r in reserved],
                        "type": doc_type.value,
                    },
                )

        logger.info(
            "Reserved %d %s number(s) for %s: %s",
            len(reserved),
            doc_type.value,
            actor.department,
            ", ".join(r.number for r in reserved),
        )
        return reserved

    @staticmethod
    def list(
        db: Session, scope: ReservationScope, actor: CurrentUser
    ) -> list[ReservationRead]:
        stmt = select(Reservation)
        if scope == ReservationScope.department:
            if not actor.department:
                return []
            stmt = stmt.where(
                Reservation.department == actor.department,
                Reservation.used.is_(False),
            )
        elif scope == ReservationScope.owner:
            stmt = stmt.where(
                Reservation.owner_id == actor.id,
                Reservation.used.is_(False),
            )
        elif not actor.is_admin:
            raise PermissionDenied()
        stmt = stmt.order_by(Reservation.created_at.desc(), Reservation.number.desc())
        return [ReservationRead.model_validate(r) for r in db.scalars(stmt)]

    @staticmethod
    def get(db: Session, reservation_id: str) -> Reservation:
        reservation = db.get(Reservation, coerce_uuid(reservation_id))
        if not reservation:
            raise NotFound("Reserved number not found")
        return reservation

    @staticmethod
    def delete(db: Session, reservation_id: str, actor: CurrentUser) -> None:
        reservation = Reservations.get(db, reservation_id)
        number = reservation.number
        db.delete(reservation)
        db.flush()
        logger.info("Deleted reservation %s (%s)", reservation_id, number)
        publish_event(
            EventType.reservation_deleted,
            entity_type="reservation",
            entity_id=reservation_id,
            actor_id=actor.id,
            payload={"number": number},
        )


reservations = Reservations()
