from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.person import PersonRole


class CurrentUser(BaseModel):
    """Verified identity attached to an authenticated request."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    name: str
    email: str
    department: str | None = None
    role: PersonRole

    @property
    def is_admin(self) -> bool:
        return self.role == PersonRole.admin

    @property
    def display_label(self) -> str:
        return f"{self.name} ({self.email})"


class PersonBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    email: str = Field(min_length=3, max_length=255)
    department: str | None = Field(default=None, max_length=120)
    role: PersonRole = PersonRole.user


class PersonCreate(PersonBase):
    pass


class PersonUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=160)
    email: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=120)
    role: PersonRole | None = None
    is_active: bool | None = None


class PersonRead(PersonBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_active: bool
    created_at: datetime
