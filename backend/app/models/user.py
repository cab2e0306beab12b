from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, String, func
from sqlalchemy.types import JSON

from app.database import Base, new_id


class User(Base):
    __tablename__ = "users"

    uid = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(512), nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    display_name = Column(String(255), default="", nullable=False)
    photo_url = Column(String(1000), default="", nullable=False)
    user_type = Column(String(20), default="jobseeker", nullable=False)
    is_profile_complete = Column(Boolean, default=False, nullable=False)
    notification_preferences = Column(JSON)
    fcm_token = Column(String(4096))
    is_admin = Column(Boolean, default=False, nullable=False)
    created_via = Column(String(50), default="email", nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    last_login_at = Column(DateTime)
