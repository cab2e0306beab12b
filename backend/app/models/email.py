from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, String, Text, func

from app.database import Base, new_id


class EmailSettings(Base):
    """SMTP credentials used by the email relay; a single row keyed ``email``."""

    __tablename__ = "email_settings"

    key = Column(String(20), primary_key=True, default="email")
    email = Column(String(320), nullable=False)
    password = Column(String(512), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class SentEmail(Base):
    __tablename__ = "sent_emails"

    id = Column(String(32), primary_key=True, default=new_id)
    to = Column(String(320))
    subject = Column(String(500))
    success = Column(Boolean, nullable=False)
    type = Column(String(30), default="application", nullable=False)
    application_id = Column(String(32))
    message_id = Column(String(500))
    error = Column(Text)
    sent_at = Column(DateTime, server_default=func.now())
