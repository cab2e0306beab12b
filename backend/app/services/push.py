from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import RelayFailure
from app.log import get_logger
from app.models.application import Application
from app.models.job import Job
from app.models.user import User


log = get_logger(__name__)


class PushClient:
    """Posts push messages to the configured push-delivery endpoint."""

    def __init__(
        self,
        endpoint: str | None = None,
        server_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint or settings.push_endpoint
        self.server_key = server_key if server_key is not None else settings.push_server_key
        self.timeout = timeout or settings.push_timeout_seconds
        self.transport = transport

    def send(self, message: dict[str, Any]) -> dict[str, Any]:
        token = message.get("token")
        if not token:
            raise RelayFailure("Push message has no target token")

        body: dict[str, Any] = {"to": token, "notification": message.get("notification") or {}}
        if message.get("data"):
            body["data"] = message["data"]

        headers = {"Content-Type": "application/json"}
        if self.server_key:
            headers["Authorization"] = f"key={self.server_key}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.endpoint, json=body, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RelayFailure(f"Error sending notification: {exc}") from exc

        try:
            return response.json()
        except ValueError:
            return {}


def get_push_client() -> PushClient:
    return PushClient()


def new_application_message(token: str, job_title: str) -> dict[str, Any]:
    return {
        "token": token,
        "notification": {
            "title": "New Job Application",
            "body": f"Someone has applied for your job posting: {job_title}",
        },
    }


def on_application_created(db: Session, application_id: str, push_client: PushClient) -> bool:
    """Push a "new application" message to the job owner's device.

    Returns True when a message was handed to the push endpoint. Failures are
    logged and never raised.
    """
    try:
        application = db.get(Application, application_id)
        if application is None:
            log.warning("Application %s vanished before its push notification", application_id)
            return False

        owner_id = application.job_owner_id
        if not owner_id:
            job = db.get(Job, application.job_id)
            owner_id = job.user_id if job else None
        owner = db.get(User, owner_id) if owner_id else None
        if owner is None or not owner.fcm_token:
            return False

        push_client.send(new_application_message(owner.fcm_token, application.job_title))
        log.info("Notification sent successfully for application %s", application_id)
        return True
    except Exception:
        log.exception("Error sending notification for application %s", application_id)
        return False


def run_on_application_created(
    application_id: str,
    push_client: PushClient,
    session_factory: Callable[[], Session],
) -> None:
    db = session_factory()
    try:
        on_application_created(db, application_id, push_client)
    finally:
        db.close()
