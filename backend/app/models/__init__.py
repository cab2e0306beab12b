from app.models.application import Application
from app.models.email import EmailSettings, SentEmail
from app.models.job import Job
from app.models.notification import Notification
from app.models.user import User

__all__ = ["User", "Job", "Application", "Notification", "EmailSettings", "SentEmail"]
