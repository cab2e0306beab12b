from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session, sessionmaker

from app.auth import Principal, get_current_principal
from app.database import get_db, get_session_factory
from app.models.application import Application
from app.schemas.application import (
    ApplicationDetailOut,
    ApplicationForm,
    ApplicationOut,
    ApplicationStatsOut,
    ApplicationStatusUpdate,
    ApplicationSubmit,
)
from app.services import applications as application_service
from app.services.notifications import forget_application, inbox_cache
from app.services.push import PushClient, get_push_client, run_on_application_created


router = APIRouter()


@router.get("", response_model=list[ApplicationOut])
def list_my_applications(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[Application]:
    return application_service.list_my_applications(db, principal)


@router.post("", response_model=ApplicationOut, status_code=201)
def submit_application(
    payload: ApplicationSubmit,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    push_client: PushClient = Depends(get_push_client),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> Application:
    form = ApplicationForm(**payload.model_dump(exclude={"job_id"}))
    application = application_service.submit_application(db, principal, payload.job_id, form)
    background_tasks.add_task(run_on_application_created, application.id, push_client, session_factory)
    return application


@router.get("/received", response_model=list[ApplicationOut])
def list_received_applications(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[Application]:
    return application_service.list_received_applications(db, principal)


@router.get("/stats", response_model=ApplicationStatsOut)
def application_stats(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplicationStatsOut:
    return application_service.application_stats(db, principal)


@router.get("/{app_id}", response_model=ApplicationOut)
def get_application(
    app_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Application:
    return application_service.get_application(db, principal, app_id)


@router.get("/{app_id}/detail", response_model=ApplicationDetailOut)
def get_application_detail(
    app_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplicationDetailOut:
    if db.get(Application, app_id) is not None:
        application_service.get_application(db, principal, app_id)
    return inbox_cache(principal).get(db, app_id)


@router.put("/{app_id}", response_model=ApplicationOut)
def update_application(
    app_id: str,
    payload: ApplicationForm,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Application:
    application = application_service.update_application(db, principal, app_id, payload)
    forget_application(app_id)
    return application


@router.patch("/{app_id}/status", response_model=ApplicationOut)
def update_application_status(
    app_id: str,
    payload: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Application:
    application = application_service.change_status(db, principal, app_id, payload.status)
    forget_application(app_id)
    return application


@router.delete("/{app_id}")
def withdraw_application(
    app_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> dict[str, str]:
    application_service.withdraw_application(db, principal, app_id)
    forget_application(app_id)
    return {"status": "deleted", "application_id": app_id}
