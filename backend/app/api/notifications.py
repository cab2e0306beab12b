from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import Principal, get_current_principal
from app.database import get_db
from app.models.notification import Notification
from app.schemas.notification import BulkResult, InboxOut, NotificationOut
from app.services import notifications as notification_service


router = APIRouter()


@router.get("", response_model=InboxOut)
def inbox(
    refresh: bool = Query(default=False),
    with_applications: bool = Query(default=True),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> InboxOut:
    cache = notification_service.inbox_cache(principal)
    if refresh:
        cache.refresh()
    return notification_service.build_inbox(db, principal, cache=cache, with_applications=with_applications)


@router.get("/unread-count")
def unread_count(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> dict[str, int]:
    return {"unread_count": notification_service.unread_count(db, principal)}


@router.post("/read-all", response_model=BulkResult)
def mark_all_read(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> BulkResult:
    return BulkResult(status="read", count=notification_service.mark_all_read(db, principal))


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Notification:
    return notification_service.mark_read(db, principal, notification_id)


@router.delete("/clear", response_model=BulkResult)
def delete_all(
    include_applications: bool = Query(default=False),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> BulkResult:
    deleted, _ = notification_service.delete_all_notifications(db, principal, include_applications)
    return BulkResult(status="deleted", count=deleted)


@router.delete("/{notification_id}")
def delete_one(
    notification_id: str,
    include_application: bool = Query(default=False),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> dict[str, str | bool]:
    application_deleted = notification_service.delete_notification(
        db, principal, notification_id, include_application=include_application
    )
    return {"status": "deleted", "notification_id": notification_id, "application_deleted": application_deleted}
