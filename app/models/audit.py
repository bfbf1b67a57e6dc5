import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class AuditLogType(enum.Enum):
    document = "document"
    auth = "auth"
    system = "system"


class AuditLog(Base):
    """Append-only record of user actions.

    The actor is stored as a snapshot so entries survive user deletion.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_timestamp", "timestamp"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    action: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[AuditLogType] = mapped_column(Enum(AuditLogType), nullable=False)

    actor_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    actor_name: Mapped[str] = mapped_column(String(160), nullable=False)
    actor_email: Mapped[str] = mapped_column(String(255), nullable=False)
    actor_role: Mapped[str | None] = mapped_column(String(40))
    actor_department: Mapped[str | None] = mapped_column(String(120))

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    @property
    def actor_label(self) -> str:
        return f"{self.actor_name} ({self.actor_email})"
