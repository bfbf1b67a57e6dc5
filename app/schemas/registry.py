from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.registry import DocumentType, ReservationStatus


# ---------------------------------------------------------------------------
# Number allocation
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    type: DocumentType
    # Range is checked by the service so callers get a 400, not a 422.
    count: int = 1


class GenerateNumberRequest(BaseModel):
    type: DocumentType


class GeneratedNumber(BaseModel):
    number: str
    type: DocumentType


class ReservationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    number: str
    type: DocumentType
    department: str
    reserved_by: str
    reserved_at: datetime
    expires_at: datetime
    status: ReservationStatus


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class DocumentCreate(BaseModel):
    number: str = Field(min_length=1, max_length=32)
    title: str = Field(min_length=1, max_length=500)
    type: DocumentType
    department: str | None = Field(default=None, max_length=120)
    sender: str | None = Field(default=None, max_length=255)
    recipient: str | None = Field(default=None, max_length=255)
    description: str | None = None
    attachments: list[str] = Field(default_factory=list)


class DocumentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    type: DocumentType | None = None
    department: str | None = Field(default=None, min_length=1, max_length=120)
    sender: str | None = Field(default=None, max_length=255)
    recipient: str | None = Field(default=None, max_length=255)
    description: str | None = None


class DocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    number: str
    title: str
    type: DocumentType
    department: str
    sender: str | None = None
    recipient: str | None = None
    description: str | None = None
    attachments: list[str] = Field(default_factory=list)
    owner_id: UUID | None = None
    registered_by: str
    created_at: datetime


class UserStats(BaseModel):
    total_documents: int
    in_documents: int
    out_documents: int
    reserved_numbers: int
