from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

from sqlalchemy.orm import Session

from app.auth import Principal
from app.config import settings
from app.errors import NotFound, PermissionDenied
from app.log import get_logger
from app.models.application import Application
from app.models.notification import Notification
from app.schemas.application import ApplicationDetailOut
from app.schemas.notification import InboxItemOut, InboxOut, NotificationOut
from app.services.applications import get_application_detail


log = get_logger(__name__)


class ApplicationDetailCache:
    """Application details looked up for an inbox, keyed by application id.

    Entries are fetched on first use and kept until ``refresh`` is called or,
    when ``ttl_seconds`` is set, until they expire. Error placeholders are
    never stored.
    """

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._details: dict[str, tuple[float, ApplicationDetailOut]] = {}

    def get(self, db: Session, application_id: str) -> ApplicationDetailOut:
        cached = self._details.get(application_id)
        if cached is not None:
            stored_at, detail = cached
            if self.ttl_seconds is None or self._clock() - stored_at < self.ttl_seconds:
                return detail
            del self._details[application_id]
        detail = get_application_detail(db, application_id)
        if not detail.error:
            self._details[application_id] = (self._clock(), detail)
        return detail

    def refresh(self, application_id: str | None = None) -> None:
        if application_id is None:
            self._details.clear()
        else:
            self._details.pop(application_id, None)

    def __contains__(self, application_id: object) -> bool:
        return application_id in self._details

    def __len__(self) -> int:
        return len(self._details)


_inbox_caches: OrderedDict[str, ApplicationDetailCache] = OrderedDict()


def inbox_cache(principal: Principal) -> ApplicationDetailCache:
    """The detail cache backing a principal's inbox.

    At most ``INBOX_CACHE_MAX_PRINCIPALS`` caches are kept; the least recently
    used one is dropped first.
    """
    cache = _inbox_caches.get(principal.uid)
    if cache is None:
        cache = ApplicationDetailCache(ttl_seconds=settings.inbox_cache_ttl_seconds)
        _inbox_caches[principal.uid] = cache
    _inbox_caches.move_to_end(principal.uid)
    while len(_inbox_caches) > max(settings.inbox_cache_max_principals, 1):
        _inbox_caches.popitem(last=False)
    return cache


def forget_application(application_id: str) -> None:
    """Drop an application from every inbox cache, after it changed or was deleted."""
    for cache in _inbox_caches.values():
        cache.refresh(application_id)


def list_notifications(db: Session, principal: Principal) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == principal.uid)
        .order_by(Notification.created_at.desc())
        .all()
    )


def unread_count(db: Session, principal: Principal) -> int:
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == principal.uid, Notification.read == False)  # noqa: E712
        .count()
    )


def build_inbox(
    db: Session,
    principal: Principal,
    cache: ApplicationDetailCache | None = None,
    with_applications: bool = True,
) -> InboxOut:
    cache = cache if cache is not None else ApplicationDetailCache()
    notifications = list_notifications(db, principal)
    items = []
    for notification in notifications:
        detail = None
        if with_applications and notification.application_id:
            detail = cache.get(db, notification.application_id)
        items.append(InboxItemOut(notification=NotificationOut.model_validate(notification), application=detail))
    unread = sum(1 for notification in notifications if not notification.read)
    return InboxOut(unread_count=unread, items=items)


def mark_read(db: Session, principal: Principal, notification_id: str) -> Notification:
    notification = _get_owned(db, principal, notification_id)
    if not notification.read:
        notification.read = True
        db.add(notification)
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, principal: Principal) -> int:
    """Mark the principal's unread notifications as read; already-read ones are not written."""
    unread = (
        db.query(Notification)
        .filter(Notification.recipient_id == principal.uid, Notification.read == False)  # noqa: E712
        .all()
    )
    for notification in unread:
        notification.read = True
        db.add(notification)
    if unread:
        db.commit()
    return len(unread)


def delete_notification(
    db: Session,
    principal: Principal,
    notification_id: str,
    include_application: bool = False,
) -> bool:
    """Delete one notification. Returns True when a referenced application was deleted too."""
    notification = _get_owned(db, principal, notification_id)
    application_id = notification.application_id
    application_deleted = False
    if include_application and application_id:
        application_deleted = _delete_application_if_present(db, application_id)
    db.delete(notification)
    db.commit()
    if application_deleted:
        forget_application(application_id)
    return application_deleted


def delete_all_notifications(db: Session, principal: Principal, include_applications: bool = False) -> tuple[int, int]:
    """Delete every notification of the principal in one transaction.

    Returns ``(notifications_deleted, applications_deleted)``.
    """
    notifications = list_notifications(db, principal)
    deleted_ids: list[str] = []
    if include_applications:
        application_ids = {n.application_id for n in notifications if n.application_id}
        deleted_ids = [a for a in sorted(application_ids) if _delete_application_if_present(db, a)]
    for notification in notifications:
        db.delete(notification)
    if notifications:
        db.commit()
    for application_id in deleted_ids:
        forget_application(application_id)
    applications_deleted = len(deleted_ids)
    log.info(
        "Deleted %d notifications and %d applications for %s",
        len(notifications),
        applications_deleted,
        principal.uid,
    )
    return len(notifications), applications_deleted


def _delete_application_if_present(db: Session, application_id: str) -> bool:
    application = db.get(Application, application_id)
    if application is None:
        return False
    db.delete(application)
    return True


def _get_owned(db: Session, principal: Principal, notification_id: str) -> Notification:
    notification = db.get(Notification, notification_id)
    if not notification:
        raise NotFound("Notification", notification_id)
    if notification.recipient_id != principal.uid:
        raise PermissionDenied("You are not allowed to modify this notification")
    return notification
