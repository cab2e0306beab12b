from __future__ import annotations

import base64
import hashlib
import hmac
import os
import secrets
import time
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthenticationRequired, PermissionDenied
from app.models.user import User


security = HTTPBearer(auto_error=False)
DEFAULT_ITERATIONS = 210_000
TOKEN_TTL_SECONDS = int(os.getenv("AUTH_TOKEN_TTL_SECONDS", str(60 * 60 * 24 * 14)))
AUTH_SECRET = os.getenv("AUTH_SECRET", "job-board-dev-secret")


@dataclass(frozen=True)
class Principal:
    """The authenticated identity a request acts as."""

    uid: str
    email: str
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(uid=user.uid, email=user.email, is_admin=bool(user.is_admin))


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        DEFAULT_ITERATIONS,
    ).hex()
    return f"pbkdf2_sha256${DEFAULT_ITERATIONS}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        _, iterations_str, salt, digest = password_hash.split("$", 3)
        iterations = int(iterations_str)
    except ValueError:
        return False
    expected = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    ).hex()
    return hmac.compare_digest(expected, digest)


def create_access_token(uid: str) -> str:
    exp = int(time.time()) + TOKEN_TTL_SECONDS
    nonce = secrets.token_hex(6)
    payload = f"{uid}:{exp}:{nonce}"
    signature = hmac.new(AUTH_SECRET.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()
    token_raw = f"{payload}:{signature}".encode("utf-8")
    return base64.urlsafe_b64encode(token_raw).decode("utf-8").rstrip("=")


def decode_access_token(token: str) -> str | None:
    if not token:
        return None
    padding = "=" * (-len(token) % 4)
    try:
        decoded = base64.urlsafe_b64decode((token + padding).encode("utf-8")).decode("utf-8")
        uid, exp_str, nonce, signature = decoded.split(":", 3)
        payload = f"{uid}:{exp_str}:{nonce}"
    except ValueError:
        return None

    expected_signature = hmac.new(
        AUTH_SECRET.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    if not hmac.compare_digest(expected_signature, signature):
        return None

    try:
        exp = int(exp_str)
    except ValueError:
        return None
    if exp < int(time.time()) or not uid:
        return None
    return uid


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationRequired()

    uid = decode_access_token(credentials.credentials)
    if uid is None:
        raise AuthenticationRequired("Invalid token")

    user = db.get(User, uid)
    if not user:
        raise AuthenticationRequired("Invalid user")
    return Principal.from_user(user)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise PermissionDenied("Only admin users can perform this action")
    return principal
