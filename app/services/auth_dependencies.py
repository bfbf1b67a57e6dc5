"""Bearer-token authentication.

Tokens are issued by the identity provider and signed with the shared
``JWT_SECRET``. The ``sub`` claim carries the person id; the person must
exist and be active for the request to proceed.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.errors import PermissionDenied
from app.models.person import Person, PersonRole
from app.schemas.person import CurrentUser

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "unauthorized", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(person: Person, expires_in: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(person.id),
        "role": person.role.value,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in or settings.jwt_expiry_seconds),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")


def require_user_auth(
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> CurrentUser:
    if not authorization:
        raise _unauthorized("Authentication required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Invalid authorization header format")

    claims = decode_access_token(token.strip())
    try:
        person_id = uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise _unauthorized("Invalid token subject")

    person = db.get(Person, person_id)
    if not person or not person.is_active:
        logger.info("Rejected token for unknown or inactive person %s", person_id)
        raise _unauthorized("User not found")
    return CurrentUser.model_validate(person)


def require_role(role: str):
    required = PersonRole(role)

    def _dependency(
        current_user: CurrentUser = Depends(require_user_auth),
    ) -> CurrentUser:
        if current_user.role != required:
            raise PermissionDenied()
        return current_user

    return _dependency
