import enum
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config import settings
from app.db import Base


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DocumentType(enum.Enum):
    inbound = "IN"
    outbound = "OUT"


class ReservationStatus(enum.Enum):
    active = "active"
    used = "used"
    expired = "expired"


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Number sequence (one row per allocation namespace)
# ---------------------------------------------------------------------------


class NumberSequence(Base):
    __tablename__ = "number_sequences"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


# ---------------------------------------------------------------------------
# Registered documents
# ---------------------------------------------------------------------------


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("number", name="uq_documents_number"),
        Index("ix_documents_department", "department"),
        Index("ix_documents_owner_id", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    number: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[DocumentType] = mapped_column(Enum(DocumentType), nullable=False)
    department: Mapped[str] = mapped_column(String(120), nullable=False)
    sender: Mapped[str | None] = mapped_column(String(255))
    recipient: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("people.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner = relationship("Person", back_populates="documents")

    @property
    def registered_by(self) -> str:
        return self.owner.name if self.owner else "Unknown User"


# ---------------------------------------------------------------------------
# Reserved numbers
# ---------------------------------------------------------------------------


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint("number", name="uq_reservations_number"),
        Index("ix_reservations_department_used", "department", "used"),
        Index("ix_reservations_owner_id", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    number: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[DocumentType] = mapped_column(Enum(DocumentType), nullable=False)
    department: Mapped[str] = mapped_column(String(120), nullable=False)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("people.id", ondelete="SET NULL")
    )
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    owner = relationship("Person", back_populates="reservations")

    @property
    def reserved_by(self) -> str:
        return self.owner.display_label if self.owner else "Unknown User"

    @property
    def reserved_at(self) -> datetime:
        return as_utc(self.created_at)

    @property
    def expires_at(self) -> datetime:
        return as_utc(self.created_at) + timedelta(days=settings.reservation_ttl_days)

    def status_at(self, now: datetime) -> ReservationStatus:
        if self.used:
            return ReservationStatus.used
        if self.expires_at < now:
            return ReservationStatus.expired
        return ReservationStatus.active

    @property
    def status(self) -> ReservationStatus:
        return self.status_at(datetime.now(timezone.utc))
