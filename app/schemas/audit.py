from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.audit import AuditLogType


class AuditLogCreate(BaseModel):
    action: str = Field(min_length=1, max_length=2000)
    type: AuditLogType = AuditLogType.system


class AuditLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: str
    type: AuditLogType
    actor_id: UUID | None = None
    actor_name: str
    actor_email: str
    actor_role: str | None = None
    actor_department: str | None = None
    timestamp: datetime
