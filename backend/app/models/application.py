from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, Text, func

from app.database import Base, new_id


class Application(Base):
    __tablename__ = "applications"
    # job_id is a plain reference: applications outlive the job they point at.
    __table_args__ = (
        Index("idx_applications_applicant", "user_id"),
        Index("idx_applications_owner", "job_owner_id"),
        Index("idx_applications_poster_email", "job_poster_email"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    job_id = Column(String(32), nullable=False)
    user_id = Column(String(32), nullable=False)
    job_owner_id = Column(String(32))
    job_poster_email = Column(String(320))
    job_title = Column(String(255), default="Untitled Job", nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    phone = Column(String(50), nullable=False)
    experience = Column(Text, nullable=False)
    cover_letter = Column(Text, default="", nullable=False)
    resume_link = Column(String(2000), nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    applied_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    status_updated_at = Column(DateTime)
