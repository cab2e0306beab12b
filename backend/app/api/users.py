from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import Principal, get_current_principal, require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.user import AdminFlagUpdate, ProfileOut, ProfileUpdate
from app.services import users as user_service


router = APIRouter()


@router.get("/me", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> User:
    return user_service.get_profile(db, principal)


@router.patch("/me", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> User:
    return user_service.update_profile(db, principal, payload)


@router.put("/{uid}/admin", response_model=ProfileOut)
def set_admin(
    uid: str,
    payload: AdminFlagUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
) -> User:
    return user_service.set_admin(db, principal, uid, payload.is_admin)
