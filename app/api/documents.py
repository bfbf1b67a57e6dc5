from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.registry import DocumentType
from app.schemas.common import ListResponse, MessageResponse
from app.schemas.person import CurrentUser
from app.schemas.registry import (
    DocumentCreate,
    DocumentRead,
    DocumentUpdate,
    GeneratedNumber,
    GenerateNumberRequest,
    ReservationCreate,
    ReservationRead,
    UserStats,
)
from app.services.auth_dependencies import require_role, require_user_auth
from app.services.registry_document import documents
from app.services.registry_numbering import allocator
from app.services.registry_reservation import ReservationScope, reservations

router = APIRouter(prefix="/documents", tags=["documents"])


# ------------------------------------------------------------------
# Number allocation
# ------------------------------------------------------------------


@router.post(
    "/reserve",
    response_model=list[ReservationRead],
    status_code=status.HTTP_201_CREATED,
)
def reserve_numbers(
    payload: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return reservations.reserve(db, payload.type, current_user, payload.count)


@router.get("/reserve", response_model=list[ReservationRead])
def list_department_reservations(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return reservations.list(db, ReservationScope.department, current_user)


@router.post("/generate-number", response_model=GeneratedNumber)
def generate_number(
    payload: GenerateNumberRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    number = allocator.generate_number(db, payload.type, current_user)
    return GeneratedNumber(number=number, type=payload.type)


@router.get("/my-reservations", response_model=list[ReservationRead])
def list_my_reservations(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return reservations.list(db, ReservationScope.owner, current_user)


@router.get("/reserved-numbers", response_model=list[ReservationRead])
def list_reserved_numbers(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    scope = ReservationScope.all if current_user.is_admin else ReservationScope.owner
    return reservations.list(db, scope, current_user)


@router.delete("/reserved-numbers/{reservation_id}", response_model=MessageResponse)
def delete_reserved_number(
    reservation_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    reservations.delete(db, reservation_id, current_user)
    return {"message": "Reserved number deleted successfully"}


# ------------------------------------------------------------------
# Registration
# ------------------------------------------------------------------


@router.post("", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
def register_document(
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return documents.register(db, payload, current_user)


@router.get("", response_model=ListResponse[DocumentRead])
def list_department_documents(
    doc_type: DocumentType | None = Query(default=None, alias="type"),
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    if not current_user.department:
        return {"items": [], "count": 0, "limit": limit, "offset": offset}
    return documents.list_response(
        db,
        current_user.department,
        None,
        doc_type,
        order_by,
        order_dir,
        limit,
        offset,
    )


@router.get("/my-documents", response_model=ListResponse[DocumentRead])
def list_my_documents(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return documents.list_response(
        db, None, str(current_user.id), None, "created_at", "desc", limit, offset
    )


@router.get("/user-stats", response_model=UserStats)
def user_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_auth),
):
    return documents.user_stats(db, current_user)


@router.get(
    "/recent",
    response_model=list[DocumentRead],
    dependencies=[Depends(require_role("admin"))],
)
def recent_documents(db: Session = Depends(get_db)):
    return documents.recent(db)


@router.get(
    "/all",
    response_model=ListResponse[DocumentRead],
    dependencies=[Depends(require_role("admin"))],
)
def list_all_documents(
    department: str | None = None,
    doc_type: DocumentType | None = Query(default=None, alias="type"),
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return documents.list_response(
        db, department, None, doc_type, order_by, order_dir, limit, offset
    )


@router.get("/{document_id}", response_model=DocumentRead)
def get_document(document_id: str, db: Session = Depends(get_db)):
    return documents.get(db, document_id)


@router.put("/{document_id}", response_model=DocumentRead)
def update_document(
    document_id: str,
    payload: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    return documents.update(db, document_id, payload, current_user)


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    documents.delete(db, document_id, current_user)
    return {"message": "Document deleted successfully"}
