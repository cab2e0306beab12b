from __future__ import annotations

import os
from datetime import datetime

import pytest

from app.config import settings
from app.errors import PermissionDenied, RelayFailure, ValidationFailed
from app.models.email import EmailSettings, SentEmail
from app.schemas.relay import ApplicationEmailData, ApplicationEmailRequest
from app.services import email_relay, mailer as mailer_module
from app.services.mailer import (
    EmailCredentials,
    Mailer,
    get_email_credentials,
    render_application_email,
    status_link,
)
from conftest import FakeMailer, make_user


def _application_data(**overrides) -> ApplicationEmailData:
    fields = {
        "application_id": "app123",
        "job_title": "Senior Data Engineer",
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "123456",
        "experience": "Five years",
        "cover_letter": "",
    }
    fields.update(overrides)
    return ApplicationEmailData(**fields)


def test_html_email_gets_resume_block_and_success_record(db, mailer):
    payload = ApplicationEmailRequest(
        to="owner@example.com",
        subject="New application",
        html="<p>Hello</p>",
        resume_url="https://example.com/cv.pdf",
    )

    result = email_relay.send_application_email(db, mailer, payload)

    assert result.success is True
    assert result.message_id == "<message-1@jobboard.test>"
    sent = mailer.sent[0]
    assert sent["html"].startswith("<p>Hello</p>")
    assert 'href="https://example.com/cv.pdf"' in sent["html"]

    record = db.query(SentEmail).one()
    assert record.success is True
    assert record.to == "owner@example.com"
    assert record.message_id == result.message_id


def test_templated_email_has_status_links_and_escapes_applicant_text(db, mailer, monkeypatch):
    monkeypatch.setattr(settings, "public_base_url", "https://jobs.example.com")
    payload = ApplicationEmailRequest(
        to="owner@example.com",
        subject="New application",
        application_data=_application_data(full_name="<script>alert(1)</script>"),
    )

    email_relay.send_application_email(db, mailer, payload)

    html = mailer.sent[0]["html"]
    assert "https://jobs.example.com/update-status?applicationId=app123&amp;status=accepted" in html
    assert "https://jobs.example.com/update-status?applicationId=app123&amp;status=rejected" in html
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert db.query(SentEmail).one().application_id == "app123"


def test_cover_letter_and_experience_sections_are_optional():
    html = render_application_email(_application_data(experience="", cover_letter="").model_dump())
    assert "Experience:" not in html
    assert "Cover Letter:" not in html

    html = render_application_email(_application_data(cover_letter="Hire me").model_dump())
    assert "Cover Letter:" in html
    assert "Hire me" in html


def test_missing_recipient_is_rejected(db, mailer):
    with pytest.raises(ValidationFailed):
        email_relay.send_application_email(db, mailer, ApplicationEmailRequest(subject="x", html="<p>x</p>"))
    with pytest.raises(ValidationFailed):
        email_relay.send_application_email(db, mailer, ApplicationEmailRequest(to="a@b.co", subject="x"))
    assert mailer.sent == []


def test_failed_send_is_recorded_and_raised(db):
    failing = FakeMailer(fail=True)
    payload = ApplicationEmailRequest(to="owner@example.com", subject="x", html="<p>x</p>")

    with pytest.raises(RelayFailure) as excinfo:
        email_relay.send_application_email(db, failing, payload)

    assert "SMTP server unavailable" in excinfo.value.message
    record = db.query(SentEmail).one()
    assert record.success is False
    assert record.error == "SMTP server unavailable"


def test_http_variant_requires_application_data(db, mailer):
    with pytest.raises(ValidationFailed):
        email_relay.send_application_email_http(
            db, mailer, ApplicationEmailRequest(to="owner@example.com", subject="x", html="<p>x</p>")
        )

    payload = ApplicationEmailRequest(to="owner@example.com", subject="x", application_data=_application_data())
    assert email_relay.send_application_email_http(db, mailer, payload).success is True


def test_test_email_is_recorded_with_its_type(db, mailer):
    result = email_relay.send_test_email(db, mailer, "admin@example.com")

    assert result.message == "Test email sent successfully"
    assert mailer.sent[0]["subject"] == "Test Email from Job Board"
    assert db.query(SentEmail).one().type == "test"
    with pytest.raises(ValidationFailed):
        email_relay.send_test_email(db, mailer, "")


def test_credentials_fall_back_to_environment(db, monkeypatch):
    monkeypatch.setattr(settings, "email_user", "relay@example.com")
    monkeypatch.setattr(settings, "email_password", "env-secret")
    assert get_email_credentials(db) == EmailCredentials("relay@example.com", "env-secret")

    db.add(EmailSettings(email="stored@example.com", password="stored-secret"))
    db.commit()
    assert get_email_credentials(db) == EmailCredentials("stored@example.com", "stored-secret")


def test_only_admins_store_email_settings(db):
    user = make_user(db, "user@example.com")
    admin = make_user(db, "admin@example.com", is_admin=True)

    with pytest.raises(PermissionDenied):
        email_relay.create_email_settings(db, user, "relay@example.com", "secret")

    email_relay.create_email_settings(db, admin, "relay@example.com", "secret")
    email_relay.create_email_settings(db, admin, "relay2@example.com", "secret2")

    stored = db.query(EmailSettings).one()
    assert (stored.email, stored.password) == ("relay2@example.com", "secret2")


def test_mailer_sends_through_smtp(monkeypatch):
    calls = []

    class FakeSMTP:
        def __init__(self, host, port, timeout):
            calls.append(("connect", host, port))

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def starttls(self):
            calls.append(("starttls",))

        def login(self, user, password):
            calls.append(("login", user, password))

        def sendmail(self, sender, recipients, message):
            calls.append(("sendmail", sender, recipients, message))

    monkeypatch.setattr(mailer_module.smtplib, "SMTP", FakeSMTP)
    message_id = Mailer(host="smtp.example.com", port=2525).send(
        EmailCredentials("relay@example.com", "secret"), "owner@example.com", "Hi", "<p>Hi</p>"
    )

    assert calls[0] == ("connect", "smtp.example.com", 2525)
    assert calls[1] == ("starttls",)
    assert calls[2] == ("login", "relay@example.com", "secret")
    assert calls[3][2] == ["owner@example.com"]
    assert message_id in calls[3][3]


def test_test_email_template_includes_timestamp():
    html = mailer_module.render_test_email(datetime(2024, 5, 1, 9, 30, 0))
    assert "2024-05-01 09:30:00" in html


@pytest.mark.skipif("PUBLIC_BASE_URL" in os.environ, reason="PUBLIC_BASE_URL is set in the environment")
def test_status_links_point_at_the_front_end_by_default():
    assert settings.public_base_url == "http://localhost:5173"
    assert status_link("app123", "accepted") == (
        "http://localhost:5173/update-status?applicationId=app123&status=accepted"
    )
