from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import NotFound, ValidationError
from app.models.person import Person
from app.schemas.person import CurrentUser, PersonCreate, PersonUpdate
from app.services.common import coerce_uuid
from app.services.event import EventType, publish_event

logger = logging.getLogger(__name__)


class People:
    @staticmethod
    def create(db: Session, payload: PersonCreate, actor: CurrentUser) -> Person:
        if db.scalar(select(Person.id).where(Person.email == payload.email)):
            raise ValidationError("User already exists")
        person = Person(**payload.model_dump())
        try:
            db.add(person)
            db.flush()
        except IntegrityError:
            db.rollback()
            raise ValidationError("User already exists")
        db.refresh(person)
        logger.info("Created person %s", person.id)
        publish_event(
            EventType.person_created,
            entity_type="person",
            entity_id=person.id,
            actor_id=actor.id,
            payload={"email": person.email, "role": person.role.value},
        )
        return person

    @staticmethod
    def get(db: Session, person_id: str) -> Person:
        person = db.get(Person, coerce_uuid(person_id))
        if not person:
            raise NotFound("User not found")
        return person

    @staticmethod
    def list(db: Session) -> list[Person]:
        return db.scalars(select(Person).order_by(Person.created_at.desc())).all()

    @staticmethod
    def update(
        db: Session, person_id: str, payload: PersonUpdate, actor: CurrentUser
    ) -> Person:
        person = People.get(db, person_id)
        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        email = data.get("email")
        if email and email != person.email:
            if db.scalar(select(Person.id).where(Person.email == email)):
                raise ValidationError("Email already in use")
        for key, value in data.items():
            setattr(person, key, value)
        db.flush()
        db.refresh(person)
        logger.info("Updated person %s", person.id)
        publish_event(
            EventType.person_updated,
            entity_type="person",
            entity_id=person.id,
            actor_id=actor.id,
            payload={"email": person.email},
        )
        return person

    @staticmethod
    def delete(db: Session, person_id: str, actor: CurrentUser) -> None:
        person = People.get(db, person_id)
        if person.id == actor.id:
            raise ValidationError("Cannot delete your own account")
        email = person.email
        db.delete(person)
        db.flush()
        logger.info("Deleted person %s", person_id)
        publish_event(
            EventType.person_deleted,
            entity_type="person",
            entity_id=person_id,
            actor_id=actor.id,
            payload={"email": email},
        )


people = People()
