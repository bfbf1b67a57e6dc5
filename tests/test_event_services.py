import uuid
from unittest.mock import patch

from sqlalchemy import select

from app.models.audit import AuditLog, AuditLogType
from app.services.event import EventType, publish_event
from app.tasks.events import describe_event, process_event


class TestEventType:
    def test_all_event_types_have_dotted_values(self) -> None:
        for et in EventType:
            assert "." in et.value, f"{et.name} value should contain a dot"

    def test_event_type_count(self) -> None:
        assert len(EventType) == 9

    def test_number_events(self) -> None:
        assert EventType.numbers_reserved.value == "numbers.reserved"
        assert EventType.number_generated.value == "number.generated"
        assert EventType.reservation_deleted.value == "reservation.deleted"

    def test_document_events(self) -> None:
        assert EventType.document_registered.value == "document.registered"
        assert EventType.document_updated.value == "document.updated"
        assert EventType.document_deleted.value == "document.deleted"


class TestPublishEvent:
    def test_publish_event_calls_delay(self, event_dispatch) -> None:
        entity_id = uuid.uuid4()
        actor_id = uuid.uuid4()
        publish_event(
            EventType.document_registered,
            entity_type="document",
            entity_id=entity_id,
            actor_id=actor_id,
            payload={"number": "0001"},
        )
        event_dispatch.assert_called_once_with(
            event_type="document.registered",
            entity_type="document",
            entity_id=str(entity_id),
            actor_id=str(actor_id),
            payload={"number": "0001"},
        )

    def test_publish_event_without_actor(self, event_dispatch) -> None:
        publish_event(
            EventType.reservation_deleted,
            entity_type="reservation",
            entity_id="abc",
        )
        event_dispatch.assert_called_once_with(
            event_type="reservation.deleted",
            entity_type="reservation",
            entity_id="abc",
            actor_id=None,
            payload={},
        )

    def test_publish_event_never_raises(self, event_dispatch) -> None:
        event_dispatch.side_effect = RuntimeError("broker down")
        publish_event(
            EventType.document_deleted,
            entity_type="document",
            entity_id=uuid.uuid4(),
        )
        # Should not raise


class TestDescribeEvent:
    def test_numbers_reserved(self) -> None:
        assert describe_event(
            "numbers.reserved", {"numbers": ["0001", "0002"], "type": "IN"}
        ) == ("document", "Reserved 2 document number(s): 0001, 0002")

    def test_document_registered(self) -> None:
        log_type, action = describe_event(
            "document.registered",
            {"number": "0007", "type": "OUT", "title": "Budget"},
        )
        assert log_type == "document"
        assert action == 'Registered new OUT document #0007 titled "Budget"'

    def test_person_events_are_auth(self) -> None:
        log_type, action = describe_event(
            "person.created", {"email": "a@example.com", "role": "admin"}
        )
        assert log_type == "auth"
        assert action == "Created new admin account for a@example.com"

    def test_unknown_event_is_system(self) -> None:
        log_type, _ = describe_event("something.else", {})
        assert log_type == "system"


class TestProcessEventTask:
    def _run(self, db_session, **kwargs):
        with patch("app.db.SessionLocal", return_value=db_session), patch.object(
            db_session, "close"
        ):
            process_event(**kwargs)

    def test_records_audit_entry(self, db_session, person) -> None:
        self._run(
            db_session,
            event_type="number.generated",
            entity_type="number",
            entity_id="0004",
            actor_id=str(person.id),
            payload={"number": "0004", "type": "IN"},
        )
        entries = db_session.scalars(select(AuditLog)).all()
        assert len(entries) == 1
        entry = entries[0]
        assert entry.action == "Generated new document number 0004"
        assert entry.type == AuditLogType.document
        assert entry.actor_email == person.email
        assert entry.actor_department == "Finance"
        assert entry.actor_role == "user"

    def test_skips_event_without_actor(self, db_session) -> None:
        self._run(
            db_session,
            event_type="document.deleted",
            entity_type="document",
            entity_id="abc",
        )
        assert db_session.scalars(select(AuditLog)).all() == []

    def test_skips_unknown_actor(self, db_session) -> None:
        self._run(
            db_session,
            event_type="document.deleted",
            entity_type="document",
            entity_id="abc",
            actor_id=str(uuid.uuid4()),
            payload={"number": "0001"},
        )
        assert db_session.scalars(select(AuditLog)).all() == []

    def test_audit_failure_does_not_raise(self, db_session, person) -> None:
        with patch(
            "app.services.audit_log.AuditLogs.record",
            side_effect=RuntimeError("disk full"),
        ):
            self._run(
                db_session,
                event_type="document.deleted",
                entity_type="document",
                entity_id="abc",
                actor_id=str(person.id),
                payload={"number": "0001"},
            )
        assert db_session.scalars(select(AuditLog)).all() == []
