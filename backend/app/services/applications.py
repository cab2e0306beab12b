"""Application submission and status-change workflow.

Submitting writes the application and the job owner's notification in one
transaction. Status changes are authorised here, against the job's owner,
rather than trusted from the caller.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth import Principal
from app.config import settings
from app.errors import NotFound, PermissionDenied, ValidationFailed
from app.log import get_logger
from app.models.application import Application
from app.models.job import Job
from app.models.notification import Notification
from app.models.user import User
from app.schemas.application import ApplicationDetailOut, ApplicationForm, ApplicationStatsOut
from app.services.validation import APPLICATION_STATUSES, validate_application_form


log = get_logger(__name__)

FORM_FIELDS = ("full_name", "email", "phone", "experience", "cover_letter", "resume_link")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def submit_application(db: Session, principal: Principal, job_id: str, form: ApplicationForm) -> Application:
    data = _clean(form)
    errors = validate_application_form(data)
    if errors:
        raise ValidationFailed(errors)

    job = db.get(Job, job_id)
    if not job:
        raise NotFound("Job", job_id)

    owner = db.get(User, job.user_id)
    job_poster_email = owner.email if owner else job.user_email
    job_title = job.title or "Untitled Job"

    application = Application(
        **data,
        job_id=job.id,
        user_id=principal.uid,
        job_owner_id=job.user_id,
        job_poster_email=job_poster_email,
        job_title=job_title,
        status="pending",
        applied_at=_utcnow(),
    )
    db.add(application)
    db.flush()

    db.add(
        _owner_notification(
            application,
            job.user_id,
            f"New job application received for {job_title} from {application.full_name}",
        )
    )
    try:
        db.commit()
    except Exception:
        db.rollback()
        log.exception("Failed to store application for job %s", job_id)
        raise
    db.refresh(application)
    log.info("Application %s submitted for job %s by %s", application.id, job.id, principal.uid)
    return application


def update_application(
    db: Session, principal: Principal, application_id: str, form: ApplicationForm
) -> Application:
    """Edit the applicant-supplied fields in place and tell the job owner.

    Status, job and ownership stay as they are.
    """
    application = _get(db, application_id)
    if application.user_id != principal.uid:
        raise PermissionDenied("Only the applicant can edit this application")

    data = _clean(form)
    errors = validate_application_form(data)
    if errors:
        raise ValidationFailed(errors)

    for key, value in data.items():
        setattr(application, key, value)
    db.add(application)

    job = db.get(Job, application.job_id)
    owner_id = job.user_id if job is not None else application.job_owner_id
    if owner_id:
        db.add(
            _owner_notification(
                application,
                owner_id,
                f"Application for {application.job_title} from {application.full_name} was updated",
            )
        )
    try:
        db.commit()
    except Exception:
        db.rollback()
        log.exception("Failed to update application %s", application_id)
        raise
    db.refresh(application)
    return application


def withdraw_application(db: Session, principal: Principal, application_id: str) -> None:
    """Delete an application. Allowed for the applicant and for the owner of the job."""
    application = _get(db, application_id)
    job = db.get(Job, application.job_id)
    if application.user_id != principal.uid and not _is_job_owner(principal, application, job):
        raise PermissionDenied("Only the applicant or the job owner can delete this application")
    db.delete(application)
    db.commit()
    log.info("Application %s deleted by %s", application_id, principal.uid)


def get_application(db: Session, principal: Principal, application_id: str) -> Application:
    application = _get(db, application_id)
    job = db.get(Job, application.job_id)
    if application.user_id != principal.uid and not _is_job_owner(principal, application, job):
        raise PermissionDenied("You are not allowed to view this application")
    return application


def list_my_applications(db: Session, principal: Principal) -> list[Application]:
    return (
        db.query(Application)
        .filter(Application.user_id == principal.uid)
        .order_by(Application.applied_at.desc())
        .all()
    )


def list_received_applications(db: Session, principal: Principal) -> list[Application]:
    return (
        db.query(Application)
        .filter(
            or_(
                Application.job_owner_id == principal.uid,
                Application.job_poster_email == principal.email,
            )
        )
        .order_by(Application.applied_at.desc())
        .all()
    )


def application_stats(db: Session, principal: Principal) -> ApplicationStatsOut:
    statuses = [row.status for row in db.query(Application.status).filter(Application.user_id == principal.uid).all()]
    counts = Counter(statuses)
    return ApplicationStatsOut(
        pending=counts.get("pending", 0),
        accepted=counts.get("accepted", 0),
        rejected=counts.get("rejected", 0),
    )


def change_status(
    db: Session,
    principal: Principal,
    application_id: str,
    status: str,
    notify_applicant: bool | None = None,
) -> Application:
    """Set an application's status. Any status may follow any other; only the job owner may write it."""
    if status not in APPLICATION_STATUSES:
        raise ValidationFailed({"status": f"Status must be one of: {', '.join(APPLICATION_STATUSES)}"})

    application = _get(db, application_id)
    job = db.get(Job, application.job_id)
    if not _is_job_owner(principal, application, job):
        log.warning("Rejected status change on %s by non-owner %s", application_id, principal.uid)
        raise PermissionDenied("Only the job owner can update the application status")

    previous = application.status
    now = _utcnow()
    application.status = status
    application.status_updated_at = now
    application.updated_at = now
    db.add(application)

    if notify_applicant is None:
        notify_applicant = settings.notify_applicant_on_status_change
    if notify_applicant and status != previous:
        db.add(
            Notification(
                recipient_id=application.user_id,
                message=_status_message(application.job_title, status),
                type="status-update",
                application_id=application.id,
                job_id=application.job_id,
                status=status,
                read=False,
                created_at=now,
            )
        )

    db.commit()
    db.refresh(application)
    log.info("Application %s set to %s by %s", application_id, status, principal.uid)
    return application


def get_application_detail(db: Session, application_id: str) -> ApplicationDetailOut:
    """Read an application for display, substituting a placeholder when it no longer exists."""
    try:
        application = db.get(Application, application_id)
    except SQLAlchemyError:
        log.exception("Error fetching application %s", application_id)
        return ApplicationDetailOut(
            id=application_id,
            full_name="Error Loading Application",
            resume_link="",
            status="error",
            applied_at=_utcnow(),
            error=True,
        )
    if application is None:
        log.info("Application %s not found, using placeholder", application_id)
        return ApplicationDetailOut(
            id=application_id,
            full_name="Application Deleted",
            resume_link="",
            status="deleted",
            applied_at=_utcnow(),
            not_found=True,
        )

    status = application.status or "pending"
    status_updated_at = application.status_updated_at
    if status_updated_at is None and status in ("accepted", "rejected"):
        status_updated_at = application.updated_at or application.applied_at
    return ApplicationDetailOut(
        id=application.id,
        full_name=application.full_name,
        resume_link=application.resume_link or "",
        status=status,
        job_id=application.job_id,
        job_title=application.job_title,
        applied_at=application.applied_at,
        status_updated_at=status_updated_at,
    )


def _status_message(job_title: str, status: str) -> str:
    if status == "pending":
        return f"Your application for {job_title} is back under review"
    return f"Your application for {job_title} has been {status}"


def _owner_notification(application: Application, owner_id: str, message: str) -> Notification:
    return Notification(
        recipient_id=owner_id,
        message=message,
        type="application",
        application_id=application.id,
        job_id=application.job_id,
        full_name=application.full_name,
        resume_link=application.resume_link,
        status=application.status,
        read=False,
        created_at=_utcnow(),
    )


def _is_job_owner(principal: Principal, application: Application, job: Job | None) -> bool:
    if job is not None:
        return job.user_id == principal.uid
    if application.job_owner_id:
        return application.job_owner_id == principal.uid
    return bool(application.job_poster_email) and application.job_poster_email == principal.email


def _get(db: Session, application_id: str) -> Application:
    application = db.get(Application, application_id)
    if not application:
        raise NotFound("Application", application_id)
    return application


def _clean(form: ApplicationForm) -> dict[str, str]:
    raw = form.model_dump()
    return {key: str(raw.get(key) or "").strip() for key in FORM_FIELDS}
