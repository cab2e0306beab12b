from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ApplicationForm(BaseModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""
    cover_letter: str = ""
    resume_link: str = ""


class ApplicationStatusUpdate(BaseModel):
    status: Literal["pending", "accepted", "rejected"]


class ApplicationOut(BaseModel):
    id: str
    job_id: str
    user_id: str
    job_owner_id: str | None = None
    job_poster_email: str | None = None
    job_title: str
    full_name: str
    email: str
    phone: str
    experience: str
    cover_letter: str = ""
    resume_link: str
    status: str
    applied_at: datetime | None = None
    updated_at: datetime | None = None
    status_updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ApplicationDetailOut(BaseModel):
    """An application as seen from the inbox; placeholders stand in for deleted records."""

    id: str
    full_name: str
    resume_link: str = ""
    status: str
    job_id: str | None = None
    job_title: str | None = None
    applied_at: datetime | None = None
    status_updated_at: datetime | None = None
    not_found: bool = False
    error: bool = False


class ApplicationStatsOut(BaseModel):
    pending: int = 0
    accepted: int = 0
    rejected: int = 0


class ApplicationSubmit(ApplicationForm):
    job_id: str
