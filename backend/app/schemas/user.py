from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel


class ProfileOut(BaseModel):
    uid: str
    email: str
    email_verified: bool
    display_name: str
    photo_url: str
    user_type: str
    is_profile_complete: bool
    notification_preferences: dict[str, Any] | None = None
    is_admin: bool
    created_via: str
    created_at: datetime | None = None
    last_login_at: datetime | None = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    display_name: str | None = None
    photo_url: str | None = None
    user_type: Literal["jobseeker", "employer"] | None = None
    is_profile_complete: bool | None = None
    notification_preferences: dict[str, Any] | None = None
    fcm_token: str | None = None


class AdminFlagUpdate(BaseModel):
    is_admin: bool
