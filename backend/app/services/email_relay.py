"""Email relay functions: application emails, test emails and relay credentials.

Every send attempt leaves a ``sent_emails`` record. A failure to store that
record is logged and does not change the outcome of the send.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth import Principal
from app.errors import PermissionDenied, RelayFailure, ValidationFailed
from app.log import get_logger
from app.models.email import EmailSettings, SentEmail
from app.schemas.relay import ApplicationEmailRequest, RelayResponse
from app.services.mailer import (
    Mailer,
    get_email_credentials,
    render_application_email,
    render_resume_block,
    render_test_email,
)


log = get_logger(__name__)

TEST_SUBJECT = "Test Email from Job Board"


def send_application_email(db: Session, mailer: Mailer, payload: ApplicationEmailRequest) -> RelayResponse:
    if not payload.to or not payload.subject:
        raise ValidationFailed({"to": "The relay requires \"to\" and \"subject\" parameters."})

    if payload.html:
        content = payload.html + render_resume_block(payload.resume_url)
    elif payload.application_data is not None:
        content = render_application_email(payload.application_data.model_dump(), payload.resume_url)
    else:
        raise ValidationFailed({"html": "The relay requires either \"html\" or \"application_data\"."})

    application_id = payload.application_data.application_id if payload.application_data else None
    message_id = _deliver(db, mailer, payload.to, payload.subject, content, "application", application_id)
    return RelayResponse(success=True, message="Email sent successfully", message_id=message_id)


def send_application_email_http(db: Session, mailer: Mailer, payload: ApplicationEmailRequest) -> RelayResponse:
    """Unauthenticated variant: only the templated ``application_data`` form is accepted."""
    if not payload.to or not payload.subject or payload.application_data is None:
        raise ValidationFailed({"request": "Missing required parameters"})
    content = render_application_email(payload.application_data.model_dump())
    message_id = _deliver(
        db, mailer, payload.to, payload.subject, content, "application", payload.application_data.application_id
    )
    return RelayResponse(success=True, message="Email sent successfully", message_id=message_id)


def send_test_email(db: Session, mailer: Mailer, to: str) -> RelayResponse:
    if not to:
        raise ValidationFailed({"to": "Recipient email (to) is required"})
    content = render_test_email(datetime.now(timezone.utc))
    message_id = _deliver(db, mailer, to, TEST_SUBJECT, content, "test", None)
    return RelayResponse(success=True, message="Test email sent successfully", message_id=message_id)


def create_email_settings(db: Session, principal: Principal, email: str, password: str) -> RelayResponse:
    if not principal.is_admin:
        raise PermissionDenied("Only admin users can set email settings")
    if not email or not password:
        raise ValidationFailed({"email": "Email and password are required"})

    stored = db.get(EmailSettings, "email")
    if stored is None:
        stored = EmailSettings(key="email", email=email, password=password)
    else:
        stored.email = email
        stored.password = password
    db.add(stored)
    db.commit()
    log.info("Email settings updated by %s", principal.uid)
    return RelayResponse(success=True, message="Email settings updated successfully")


def _deliver(
    db: Session,
    mailer: Mailer,
    to: str,
    subject: str,
    html: str,
    email_type: str,
    application_id: str | None,
) -> str:
    credentials = get_email_credentials(db)
    try:
        message_id = mailer.send(credentials, to, subject, html)
    except Exception as exc:
        log.error("Error sending email to %s: %s", to, exc)
        _record(
            db,
            SentEmail(
                to=to,
                subject=subject,
                success=False,
                type=email_type,
                application_id=application_id,
                error=str(exc),
            ),
        )
        raise RelayFailure(f"Failed to send email: {exc}") from exc

    _record(
        db,
        SentEmail(
            to=to,
            subject=subject,
            success=True,
            type=email_type,
            application_id=application_id,
            message_id=message_id,
        ),
    )
    return message_id


def _record(db: Session, entry: SentEmail) -> None:
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("Error storing sent email record")
