from app.models.audit import AuditLog, AuditLogType  # noqa: F401
from app.models.person import Person, PersonRole  # noqa: F401
from app.models.registry import (  # noqa: F401
    Document,
    DocumentType,
    NumberSequence,
    Reservation,
    ReservationStatus,
)
