from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, Text, func

from app.database import Base, new_id


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_owner", "user_id"),
        Index("idx_jobs_category", "category"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(100), nullable=False)
    company = Column(String(50), nullable=False)
    location = Column(String(50), nullable=False)
    salary = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    job_type = Column(String(20), nullable=False)
    category = Column(String(100))
    user_id = Column(String(32), nullable=False)
    user_email = Column(String(320))
    posted_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
