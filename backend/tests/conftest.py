from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import Principal, create_access_token, hash_password
from app.database import Base, get_db, get_session_factory
from app.errors import RelayFailure
from app.main import app
from app.models.job import Job
from app.models.user import User
from app.services.mailer import get_mailer
from app.services.push import get_push_client


JOB_DESCRIPTION = (
    "Build and maintain data pipelines, review pull requests and mentor two junior engineers."
)


class FakeMailer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    def send(self, credentials, to: str, subject: str, html: str) -> str:
        if self.fail:
            raise OSError("SMTP server unavailable")
        self.sent.append({"from": credentials.user, "to": to, "subject": subject, "html": html})
        return f"<message-{len(self.sent)}@jobboard.test>"


class FakePushClient:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[dict[str, Any]] = []

    def send(self, message: dict[str, Any]) -> dict[str, Any]:
        if self.fail:
            raise RelayFailure("push endpoint unavailable")
        self.messages.append(message)
        return {"success": 1}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def client(session_factory, mailer, push_client):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_push_client] = lambda: push_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db: Session, email: str, *, is_admin: bool = False, fcm_token: str | None = None) -> Principal:
    user = User(
        email=email,
        password_hash=hash_password("password123"),
        display_name=email.split("@")[0],
        is_admin=is_admin,
        fcm_token=fcm_token,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return Principal.from_user(user)


def make_job(db: Session, owner: Principal, **overrides: Any) -> Job:
    fields = {
        "title": "Senior Data Engineer",
        "company": "Example GmbH",
        "location": "Berlin",
        "salary": "50k-80k",
        "description": JOB_DESCRIPTION,
        "job_type": "full-time",
        "category": "technology",
    }
    fields.update(overrides)
    job = Job(**fields, user_id=owner.uid, user_email=owner.email)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def auth_headers(principal: Principal) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(principal.uid)}"}
