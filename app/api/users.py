from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.common import MessageResponse
from app.schemas.person import CurrentUser, PersonCreate, PersonRead, PersonUpdate
from app.services.auth_dependencies import require_role, require_user_auth
from app.services.person import people

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=CurrentUser)
def get_profile(current_user: CurrentUser = Depends(require_user_auth)):
    return current_user


@router.get(
    "",
    response_model=list[PersonRead],
    dependencies=[Depends(require_role("admin"))],
)
def list_users(db: Session = Depends(get_db)):
    return people.list(db)


@router.post("", response_model=PersonRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: PersonCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    return people.create(db, payload, current_user)


@router.put("/{person_id}", response_model=PersonRead)
def update_user(
    person_id: str,
    payload: PersonUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    return people.update(db, person_id, payload, current_user)


@router.delete("/{person_id}", response_model=MessageResponse)
def delete_user(
    person_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("admin")),
):
    people.delete(db, person_id, current_user)
    return {"message": "User deleted successfully"}
