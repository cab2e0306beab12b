from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import Principal, create_access_token, get_current_principal
from app.database import get_db
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from app.services import users as user_service


router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user = user_service.register_user(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        user_type=payload.user_type,
    )
    return AuthResponse(access_token=create_access_token(user.uid), uid=user.uid, email=user.email)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user = user_service.authenticate(db, payload.email, payload.password)
    return AuthResponse(access_token=create_access_token(user.uid), uid=user.uid, email=user.email)


@router.get("/me", response_model=MeResponse)
def me(principal: Principal = Depends(get_current_principal)) -> MeResponse:
    return MeResponse(uid=principal.uid, email=principal.email, is_admin=principal.is_admin)
