import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"

import uuid  # noqa: E402
from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.db import Base, SessionLocal, engine  # noqa: E402
from app.models.person import Person, PersonRole  # noqa: E402
from app.schemas.person import CurrentUser  # noqa: E402
from app.services.auth_dependencies import create_access_token  # noqa: E402


def make_person(db_session, department="Finance", role=PersonRole.user, **overrides):
    defaults = dict(
        name=f"User {uuid.uuid4().hex[:6]}",
        email=f"user-{uuid.uuid4().hex[:8]}@example.com",
        department=department,
        role=role,
    )
    defaults.update(overrides)
    person = Person(**defaults)
    db_session.add(person)
    db_session.commit()
    db_session.refresh(person)
    return person


def bearer(person) -> dict:
    return {"Authorization": f"Bearer {create_access_token(person)}"}


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def event_dispatch():
    """Keep Celery out of tests; assert on the mock where it matters."""
    with patch("app.tasks.events.process_event.delay") as mock_delay:
        yield mock_delay


@pytest.fixture
def db_session(schema):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def person(db_session):
    return make_person(db_session, name="Alice Finance", department="Finance")


@pytest.fixture
def colleague(db_session):
    return make_person(db_session, name="Carol Finance", department="Finance")


@pytest.fixture
def other_person(db_session):
    return make_person(db_session, name="Bob Legal", department="Legal")


@pytest.fixture
def admin(db_session):
    return make_person(
        db_session, name="Root Admin", department="Registry", role=PersonRole.admin
    )


@pytest.fixture
def actor(person):
    return CurrentUser.model_validate(person)


@pytest.fixture
def other_actor(other_person):
    return CurrentUser.model_validate(other_person)


@pytest.fixture
def admin_actor(admin):
    return CurrentUser.model_validate(admin)


@pytest.fixture
def client(db_session):
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(person):
    return bearer(person)


@pytest.fixture
def other_headers(other_person):
    return bearer(other_person)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def person_factory(db_session):
    def _factory(**overrides):
        return make_person(db_session, **overrides)

    return _factory
