from app.schemas.application import (
    ApplicationDetailOut,
    ApplicationForm,
    ApplicationOut,
    ApplicationStatsOut,
    ApplicationStatusUpdate,
    ApplicationSubmit,
)
from app.schemas.job import JobForm, JobOut
from app.schemas.notification import BulkResult, InboxItemOut, InboxOut, NotificationOut
from app.schemas.user import AdminFlagUpdate, ProfileOut, ProfileUpdate

__all__ = [
    "JobForm",
    "JobOut",
    "ApplicationForm",
    "ApplicationSubmit",
    "ApplicationStatusUpdate",
    "ApplicationOut",
    "ApplicationDetailOut",
    "ApplicationStatsOut",
    "NotificationOut",
    "InboxItemOut",
    "InboxOut",
    "BulkResult",
    "ProfileOut",
    "ProfileUpdate",
    "AdminFlagUpdate",
]
