from __future__ import annotations

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.auth import Principal
from app.errors import NotFound, PermissionDenied, ValidationFailed
from app.log import get_logger
from app.models.job import Job
from app.schemas.job import JobForm
from app.services.validation import KNOWN_CATEGORIES, validate_job_form


log = get_logger(__name__)

JOB_FIELDS = ("title", "company", "location", "salary", "description", "job_type", "category")


def create_job(db: Session, principal: Principal, form: JobForm) -> Job:
    data = _clean(form)
    errors = validate_job_form(data)
    if errors:
        raise ValidationFailed(errors)

    job = Job(**data, user_id=principal.uid, user_email=principal.email)
    db.add(job)
    db.commit()
    db.refresh(job)
    log.info("Job %s posted by %s", job.id, principal.uid)
    return job


def get_job(db: Session, job_id: str) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise NotFound("Job", job_id)
    return job


def list_jobs(db: Session, search: str | None = None, category: str | None = None) -> list[Job]:
    query = db.query(Job)

    term = (search or "").strip()
    if term:
        pattern = f"%{_escape_like(term)}%"
        query = query.filter(
            or_(
                Job.title.ilike(pattern, escape="\\"),
                Job.company.ilike(pattern, escape="\\"),
                Job.description.ilike(pattern, escape="\\"),
            )
        )

    wanted = (category or "").strip().lower()
    if wanted == "other":
        query = query.filter(
            or_(
                Job.category.is_(None),
                Job.category == "",
                func.lower(Job.category).notin_(KNOWN_CATEGORIES),
            )
        )
    elif wanted:
        query = query.filter(func.lower(Job.category) == wanted)

    return query.order_by(Job.posted_at.desc()).all()


def list_posted_jobs(db: Session, principal: Principal) -> list[Job]:
    """Jobs owned by the principal, including legacy records matched only by owner email."""
    return (
        db.query(Job)
        .filter(or_(Job.user_id == principal.uid, Job.user_email == principal.email))
        .order_by(Job.posted_at.desc())
        .all()
    )


def update_job(db: Session, principal: Principal, job_id: str, form: JobForm) -> Job:
    job = get_job(db, job_id)
    if job.user_id != principal.uid:
        raise PermissionDenied("You are not authorized to edit this job")

    data = _clean(form)
    errors = validate_job_form(data)
    if errors:
        raise ValidationFailed(errors)

    for key, value in data.items():
        setattr(job, key, value)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, principal: Principal, job_id: str) -> None:
    """Delete a job. Its applications and notifications are left in place."""
    job = get_job(db, job_id)
    if job.user_id != principal.uid:
        raise PermissionDenied("You are not authorized to delete this job")
    db.delete(job)
    db.commit()
    log.info("Job %s deleted by %s", job_id, principal.uid)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _clean(form: JobForm) -> dict[str, str]:
    raw = form.model_dump()
    return {key: str(raw.get(key) or "").strip() for key in JOB_FIELDS}
