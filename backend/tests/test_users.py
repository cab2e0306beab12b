from __future__ import annotations

import pytest

from app.auth import Principal
from app.bootstrap import ensure_default_admin
from app.config import settings
from app.errors import AuthenticationRequired, Conflict, PermissionDenied, ValidationFailed
from app.models.user import User
from app.schemas.user import ProfileUpdate
from app.services import users as user_service
from conftest import make_user


def test_register_normalises_email_and_creates_profile(db):
    user = user_service.register_user(db, "  Ada@Example.com ", "password123", full_name="Ada Lovelace")

    assert user.email == "ada@example.com"
    assert user.display_name == "Ada Lovelace"
    assert user.user_type == "jobseeker"
    assert user.is_admin is False
    assert user.last_login_at is not None


def test_register_rejects_duplicates_and_bad_input(db):
    user_service.register_user(db, "ada@example.com", "password123")

    with pytest.raises(Conflict):
        user_service.register_user(db, "ADA@example.com", "password123")
    with pytest.raises(ValidationFailed):
        user_service.register_user(db, "not-an-email", "password123")
    with pytest.raises(ValidationFailed):
        user_service.register_user(db, "grace@example.com", "password123", user_type="recruiter")


def test_authenticate_checks_password_and_stamps_login(db):
    user_service.register_user(db, "ada@example.com", "password123")

    with pytest.raises(AuthenticationRequired):
        user_service.authenticate(db, "ada@example.com", "wrong-password")
    with pytest.raises(AuthenticationRequired):
        user_service.authenticate(db, "nobody@example.com", "password123")

    user = user_service.authenticate(db, "ADA@example.com", "password123")
    assert user.email == "ada@example.com"


def test_ensure_profile_fills_missing_display_name_only(db):
    user = user_service.register_user(db, "ada@example.com", "password123")
    user = user_service.ensure_profile(db, user, full_name="Ada Lovelace")
    assert user.display_name == "Ada Lovelace"

    user = user_service.ensure_profile(db, user, full_name="Someone Else")
    assert user.display_name == "Ada Lovelace"


def test_update_profile_applies_only_sent_fields(db):
    principal = make_user(db, "ada@example.com", fcm_token="old-token")

    user = user_service.update_profile(
        db, principal, ProfileUpdate(user_type="employer", notification_preferences={"email": False})
    )
    assert user.user_type == "employer"
    assert user.notification_preferences == {"email": False}
    assert user.fcm_token == "old-token"

    user = user_service.update_profile(db, principal, ProfileUpdate(fcm_token=None, display_name=None))
    assert user.fcm_token is None
    assert user.display_name == "ada"


def test_set_admin_requires_admin(db):
    admin = make_user(db, "admin@example.com", is_admin=True)
    member = make_user(db, "member@example.com")

    with pytest.raises(PermissionDenied):
        user_service.set_admin(db, member, member.uid, True)

    promoted = user_service.set_admin(db, admin, member.uid, True)
    assert promoted.is_admin is True
    assert Principal.from_user(promoted).is_admin is True


def test_default_admin_is_created_then_promoted(engine, db, monkeypatch):
    monkeypatch.setattr(settings, "default_admin_email", "Root@Example.com")
    monkeypatch.setattr(settings, "default_admin_password", "bootstrap-pass")

    admin = ensure_default_admin(engine)
    assert admin.email == "root@example.com"
    assert admin.is_admin is True
    assert admin.created_via == "bootstrap"

    stored = db.query(User).filter(User.email == "root@example.com").one()
    stored.is_admin = False
    db.commit()

    assert ensure_default_admin(engine).is_admin is True
    assert db.query(User).count() == 1


def test_default_admin_skipped_without_configuration(engine, monkeypatch):
    monkeypatch.setattr(settings, "default_admin_email", "")
    assert ensure_default_admin(engine) is None

    monkeypatch.setattr(settings, "default_admin_email", "root@example.com")
    monkeypatch.setattr(settings, "default_admin_password", "")
    assert ensure_default_admin(engine) is None
