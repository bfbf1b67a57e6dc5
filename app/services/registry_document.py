from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import DuplicateNumber, ForbiddenNumber, NotFound, ValidationError
from app.models.registry import Document, DocumentType, Reservation
from app.schemas.person import CurrentUser
from app.schemas.registry import DocumentCreate, DocumentRead, DocumentUpdate, UserStats
from app.services.common import apply_ordering, apply_pagination, coerce_uuid
from app.services.event import EventType, publish_event
from app.services.registry_numbering import normalize_number
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {
    "created_at": Document.created_at,
    "number": Document.number,
    "title": Document.title,
}
_CLEARABLE_FIELDS = {"sender", "recipient", "description"}


class Documents(ListResponseMixin):
    @staticmethod
    def register(db: Session, payload: DocumentCreate, actor: CurrentUser) -> DocumentRead:
        """Register a document under ``payload.number``.

        A reserved number must belong to the actor's department and is consumed
        in the same transaction that creates the document. Numbers without a
        reservation are accepted as ad-hoc numbers.
        """
        number = normalize_number(payload.number)
        if not number:
            raise ValidationError("Document number is required")
        department = payload.department or actor.department
        if not department:
            raise ValidationError("Department is required")

        existing = db.scalar(select(Document.id).where(Document.number == number))
        if existing:
            raise DuplicateNumber()

        reservation = db.scalar(
            select(Reservation).where(Reservation.number == number).with_for_update()
        )
        if reservation and reservation.department != actor.department:
            logger.warning(
                "Rejected number %s for %s: reserved by department %s",
                number,
                actor.department,
                reservation.department,
            )
            raise ForbiddenNumber()

        document = Document(
            number=number,
            title=payload.title,
            type=payload.type,
            department=department,
            sender=payload.sender,
            recipient=payload.recipient,
            description=payload.description,
            attachments=list(payload.attachments),
            owner_id=actor.id,
        )
        try:
            if reservation:
                db.delete(reservation)
            db.add(document)
            db.flush()
        except IntegrityError:
            db.rollback()
            raise DuplicateNumber()
        db.refresh(document)

        logger.info(
            "Registered %s document %s%s",
            document.type.value,
            number,
            " from reservation" if reservation else "",
        )
        publish_event(
            EventType.document_registered,
            entity_type="document",
            entity_id=document.id,
            actor_id=actor.id,
            payload={
                "number": number,
                "type": document.type.value,
                "title": document.title,
                "reserved": reservation is not None,
            },
        )
        return DocumentRead.model_validate(document)

    @staticmethod
    def get(db: Session, document_id: str) -> Document:
        document = db.get(Document, coerce_uuid(document_id))
        if not document:
            raise NotFound("Document not found")
        return document

    @staticmethod
    def list(
        db: Session,
        department: str | None,
        owner_id: str | None,
        doc_type: DocumentType | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[Document]:  # type: ignore[override]
        stmt = select(Document)
        if department is not None:
            stmt = stmt.where(Document.department == department)
        if owner_id is not None:
            stmt = stmt.where(Document.owner_id == coerce_uuid(owner_id))
        if doc_type is not None:
            stmt = stmt.where(Document.type == doc_type)
        stmt = apply_ordering(stmt, order_by, order_dir, _ORDER_COLUMNS)
        return db.scalars(apply_pagination(stmt, limit, offset)).all()

    @staticmethod
    def recent(db: Session, limit: int | None = None) -> list[Document]:
        stmt = (
            select(Document)
            .order_by(Document.created_at.desc())
            .limit(limit or settings.recent_documents_limit)
        )
        return db.scalars(stmt).all()

    @staticmethod
    def update(
        db: Session, document_id: str, payload: DocumentUpdate, actor: CurrentUser
    ) -> Document:
        document = Documents.get(db, document_id)
        data = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_FIELDS
        }
        for key, value in data.items():
            setattr(document, key, value)
        db.flush()
        db.refresh(document)
        logger.info("Updated document %s", document.number)
        publish_event(
            EventType.document_updated,
            entity_type="document",
            entity_id=document.id,
            actor_id=actor.id,
            payload={"number": document.number, "changed_fields": list(data.keys())},
        )
        return document

    @staticmethod
    def delete(db: Session, document_id: str, actor: CurrentUser) -> None:
        document = Documents.get(db, document_id)
        number = document.number
        db.delete(document)
        db.flush()
        logger.info("Deleted document %s", number)
        publish_event(
            EventType.document_deleted,
            entity_type="document",
            entity_id=document_id,
            actor_id=actor.id,
            payload={"number": number},
        )

    @staticmethod
    def user_stats(db: Session, actor: CurrentUser) -> UserStats:
        counts = dict(
            db.execute(
                select(Document.type, func.count(Document.id))
                .where(Document.owner_id == actor.id)
                .group_by(Document.type)
            ).all()
        )
        reserved = db.scalar(
            select(func.count(Reservation.id)).where(
                Reservation.owner_id == actor.id, Reservation.used.is_(False)
            )
        )
        inbound = counts.get(DocumentType.inbound, 0)
        outbound = counts.get(DocumentType.outbound, 0)
        return UserStats(
            total_documents=inbound + outbound,
            in_documents=inbound,
            out_documents=outbound,
            reserved_numbers=reserved or 0,
        )


documents = Documents()
