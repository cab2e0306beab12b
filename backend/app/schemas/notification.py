from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.schemas.application import ApplicationDetailOut


class NotificationOut(BaseModel):
    id: str
    recipient_id: str
    message: str
    type: str
    application_id: str | None = None
    job_id: str | None = None
    full_name: str | None = None
    resume_link: str | None = None
    status: str | None = None
    read: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class InboxItemOut(BaseModel):
    notification: NotificationOut
    application: ApplicationDetailOut | None = None


class InboxOut(BaseModel):
    unread_count: int
    items: list[InboxItemOut]


class BulkResult(BaseModel):
    status: str
    count: int
