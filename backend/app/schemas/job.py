from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class JobForm(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    salary: str = ""
    description: str = ""
    job_type: str = ""
    category: str = ""


class JobOut(BaseModel):
    id: str
    title: str
    company: str
    location: str
    salary: str
    description: str
    job_type: str
    category: str | None = None
    user_id: str
    user_email: str | None = None
    posted_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
