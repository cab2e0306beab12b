from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.auth import Principal, get_current_principal, require_admin
from app.database import get_db
from app.schemas.relay import (
    ApplicationEmailRequest,
    EmailSettingsRequest,
    EmailTestRequest,
    PushRequest,
    RelayResponse,
)
from app.services import email_relay
from app.services.mailer import Mailer, get_mailer
from app.services.push import PushClient, get_push_client


router = APIRouter()


@router.post("/send-application-email", response_model=RelayResponse)
def send_application_email(
    payload: ApplicationEmailRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    mailer: Mailer = Depends(get_mailer),
) -> RelayResponse:
    return email_relay.send_application_email(db, mailer, payload)


@router.post("/send-application-email-http", response_model=RelayResponse)
def send_application_email_http(
    payload: ApplicationEmailRequest,
    response: Response,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> RelayResponse:
    if not payload.to or not payload.subject or payload.application_data is None:
        raise HTTPException(status_code=400, detail="Missing required parameters")
    response.headers["Access-Control-Allow-Origin"] = "*"
    return email_relay.send_application_email_http(db, mailer, payload)


@router.post("/email-settings", response_model=RelayResponse)
def create_email_settings(
    payload: EmailSettingsRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
) -> RelayResponse:
    return email_relay.create_email_settings(db, principal, payload.email, payload.password)


@router.post("/test-email", response_model=RelayResponse)
def test_email(
    payload: EmailTestRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    mailer: Mailer = Depends(get_mailer),
) -> RelayResponse:
    return email_relay.send_test_email(db, mailer, payload.to)


@router.post("/send-notification-to-owner", response_model=RelayResponse)
def send_notification_to_owner(
    payload: PushRequest,
    principal: Principal = Depends(get_current_principal),
    push_client: PushClient = Depends(get_push_client),
) -> RelayResponse:
    if payload.message is None or not payload.message.token:
        raise HTTPException(status_code=400, detail="Message data is required")
    push_client.send(payload.message.model_dump(exclude_none=True))
    return RelayResponse(success=True, message="Notification sent")
