from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, func

from app.database import Base, new_id


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notifications_recipient", "recipient_id", "created_at"),)

    id = Column(String(32), primary_key=True, default=new_id)
    recipient_id = Column(String(32), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(30), nullable=False)
    application_id = Column(String(32))
    job_id = Column(String(32))
    full_name = Column(String(255))
    resume_link = Column(String(2000))
    status = Column(String(20))
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
