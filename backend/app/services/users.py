from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.auth import Principal, hash_password, verify_password
from app.errors import AuthenticationRequired, Conflict, NotFound, PermissionDenied, ValidationFailed
from app.log import get_logger
from app.models.user import User
from app.schemas.user import ProfileUpdate
from app.services.validation import EMAIL_PATTERN


log = get_logger(__name__)

USER_TYPES = ("jobseeker", "employer")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def register_user(
    db: Session,
    email: str,
    password: str,
    full_name: str = "",
    user_type: str = "jobseeker",
) -> User:
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationFailed({"email": "Email is not valid"})
    if user_type not in USER_TYPES:
        raise ValidationFailed({"user_type": "User type must be jobseeker or employer"})
    if db.query(User).filter(User.email == email).first():
        raise Conflict("An account with this email already exists")

    now = _utcnow()
    user = User(
        email=email,
        password_hash=hash_password(password),
        display_name=full_name.strip(),
        user_type=user_type,
        is_profile_complete=False,
        created_via="email",
        created_at=now,
        last_login_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("User profile created for %s", user.uid)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationRequired("Invalid email or password")
    return ensure_profile(db, user)


def ensure_profile(db: Session, user: User, full_name: str = "") -> User:
    """Record a sign-in: stamp the last login and fill a missing display name."""
    user.last_login_at = _utcnow()
    if full_name.strip() and not user.display_name:
        user.display_name = full_name.strip()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_profile(db: Session, principal: Principal) -> User:
    user = db.get(User, principal.uid)
    if not user:
        raise NotFound("User", principal.uid)
    return user


def update_profile(db: Session, principal: Principal, payload: ProfileUpdate) -> User:
    user = get_profile(db, principal)
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None and key != "fcm_token":
            continue
        setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_admin(db: Session, principal: Principal, uid: str, is_admin: bool) -> User:
    if not principal.is_admin:
        raise PermissionDenied("Only admin users can change admin rights")
    user = db.get(User, uid)
    if not user:
        raise NotFound("User", uid)
    user.is_admin = is_admin
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("Admin flag for %s set to %s by %s", uid, is_admin, principal.uid)
    return user
