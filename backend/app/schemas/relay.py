from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApplicationEmailData(BaseModel):
    application_id: str
    job_title: str = "Untitled Job"
    full_name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""
    cover_letter: str = ""
    resume_url: str = ""


class ApplicationEmailRequest(BaseModel):
    to: str = ""
    subject: str = ""
    html: str | None = None
    application_data: ApplicationEmailData | None = None
    resume_url: str | None = None


class EmailSettingsRequest(BaseModel):
    email: str = ""
    password: str = ""


class EmailTestRequest(BaseModel):
    to: str = ""


class RelayResponse(BaseModel):
    success: bool
    message: str
    message_id: str | None = None


class PushNotificationBody(BaseModel):
    title: str = ""
    body: str = ""


class PushMessage(BaseModel):
    token: str = ""
    notification: PushNotificationBody = Field(default_factory=PushNotificationBody)
    data: dict[str, Any] | None = None


class PushRequest(BaseModel):
    message: PushMessage | None = None
