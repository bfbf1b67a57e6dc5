import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from app.config import settings
from app.errors import PermissionDenied
from app.services.auth_dependencies import (
    create_access_token,
    decode_access_token,
    require_role,
    require_user_auth,
)


def _token(claims):
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestTokens:
    def test_round_trip_claims(self, person):
        claims = decode_access_token(create_access_token(person))
        assert claims["sub"] == str(person.id)
        assert claims["role"] == "user"

    def test_expired_token(self, person):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = _token({"sub": str(person.id), "iat": past, "exp": past})
        with pytest.raises(HTTPException) as exc:
            decode_access_token(token)
        assert exc.value.status_code == 401
        assert exc.value.detail["message"] == "Token has expired"

    def test_wrong_signature(self, person):
        token = jwt.encode({"sub": str(person.id)}, "other-secret", algorithm="HS256")
        with pytest.raises(HTTPException) as exc:
            decode_access_token(token)
        assert exc.value.detail["message"] == "Invalid token"


class TestRequireUserAuth:
    def test_valid_token(self, db_session, person):
        user = require_user_auth(f"Bearer {create_access_token(person)}", db_session)
        assert user.id == person.id
        assert user.department == "Finance"

    def test_missing_header(self, db_session):
        with pytest.raises(HTTPException) as exc:
            require_user_auth(None, db_session)
        assert exc.value.status_code == 401

    def test_wrong_scheme(self, db_session, person):
        with pytest.raises(HTTPException) as exc:
            require_user_auth(f"Basic {create_access_token(person)}", db_session)
        assert exc.value.detail["message"] == "Invalid authorization header format"

    def test_bad_subject(self, db_session):
        with pytest.raises(HTTPException) as exc:
            require_user_auth(f"Bearer {_token({'sub': 'nobody'})}", db_session)
        assert exc.value.detail["message"] == "Invalid token subject"

    def test_unknown_person(self, db_session):
        token = _token({"sub": str(uuid.uuid4())})
        with pytest.raises(HTTPException) as exc:
            require_user_auth(f"Bearer {token}", db_session)
        assert exc.value.detail["message"] == "User not found"

    def test_inactive_person(self, db_session, person):
        person.is_active = False
        db_session.commit()
        with pytest.raises(HTTPException) as exc:
            require_user_auth(f"Bearer {create_access_token(person)}", db_session)
        assert exc.value.status_code == 401


class TestRequireRole:
    def test_admin_passes(self, admin_actor):
        assert require_role("admin")(admin_actor) is admin_actor

    def test_user_rejected(self, actor):
        with pytest.raises(PermissionDenied):
            require_role("admin")(actor)

    def test_expired_token_over_http(self, client, person):
        token = create_access_token(person, expires_in=-10)
        resp = client.get(
            "/users/profile", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired"
