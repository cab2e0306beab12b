from __future__ import annotations

import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from jinja2 import Template
from markupsafe import Markup
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.log import get_logger
from app.models.email import EmailSettings


log = get_logger(__name__)


RESUME_LINK_TEMPLATE = Template(
    """
<div style="margin-top: 20px; padding: 15px; border: 1px solid #e0e0e0; background-color: #f9f9f9; border-radius: 5px;">
  <p style="margin: 0; font-weight: bold;">Resume Attachment</p>
  <p style="margin: 10px 0 0 0;">
    <a href="{{ resume_url }}" target="_blank" style="color: #2563eb; text-decoration: none; font-weight: 500;">
      Click here to download the applicant's resume
    </a>
  </p>
</div>
    """.strip(),
    autoescape=True,
)

APPLICATION_TEMPLATE = Template(
    """
<h2>New Job Application Received</h2>
<p>A new application has been submitted for {{ job_title }}</p>
<h3>Applicant Details:</h3>
<ul>
  <li>Name: {{ full_name }}</li>
  <li>Email: {{ email }}</li>
  <li>Phone: {{ phone or "Not provided" }}</li>
  <li>Application ID: {{ application_id }}</li>
</ul>
{% if experience %}<h3>Experience:</h3>
<p>{{ experience }}</p>
{% endif %}{% if cover_letter %}<h3>Cover Letter:</h3>
<p>{{ cover_letter }}</p>
{% endif %}{{ resume_block }}
<div style="margin-top: 20px;">
  <a href="{{ accept_url }}" style="background-color: #4CAF50; color: white; padding: 10px 20px; text-decoration: none; margin-right: 10px;">Accept Application</a>
  <a href="{{ reject_url }}" style="background-color: #f44336; color: white; padding: 10px 20px; text-decoration: none;">Reject Application</a>
</div>
    """.strip(),
    autoescape=True,
)

TEST_TEMPLATE = Template(
    """
<h2>Test Email</h2>
<p>This is a test email from the {{ app_name }} application.</p>
<p>If you received this email, the email functionality is working correctly.</p>
<p>Time sent: {{ sent_at }}</p>
    """.strip(),
    autoescape=True,
)


@dataclass(frozen=True)
class EmailCredentials:
    user: str
    password: str


def get_email_credentials(db: Session) -> EmailCredentials:
    """Stored relay credentials, falling back to EMAIL_USER / EMAIL_PASSWORD."""
    try:
        stored = db.get(EmailSettings, "email")
    except SQLAlchemyError:
        log.exception("Error reading email settings, using environment credentials")
        stored = None
    if stored is not None:
        return EmailCredentials(user=stored.email, password=stored.password)
    log.debug("No stored email settings, using environment credentials")
    return EmailCredentials(user=settings.email_user, password=settings.email_password)


def status_link(application_id: str, status: str) -> str:
    return f"{settings.public_base_url}/update-status?applicationId={application_id}&status={status}"


def render_resume_block(resume_url: str | None) -> str:
    if not resume_url:
        return ""
    return RESUME_LINK_TEMPLATE.render(resume_url=resume_url)


def render_application_email(application_data: dict[str, str], resume_url: str | None = None) -> str:
    application_id = application_data.get("application_id", "")
    return APPLICATION_TEMPLATE.render(
        **application_data,
        resume_block=Markup(render_resume_block(resume_url or application_data.get("resume_url"))),
        accept_url=status_link(application_id, "accepted"),
        reject_url=status_link(application_id, "rejected"),
    )


def render_test_email(sent_at: datetime) -> str:
    return TEST_TEMPLATE.render(app_name=settings.app_name, sent_at=sent_at.strftime("%Y-%m-%d %H:%M:%S"))


class Mailer:
    """Sends HTML mail through an SMTP server with STARTTLS."""

    def __init__(self, host: str | None = None, port: int | None = None, timeout: float = 30.0) -> None:
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.timeout = timeout

    def send(self, credentials: EmailCredentials, to: str, subject: str, html: str) -> str:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = credentials.user
        msg["To"] = to
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(html, "html", "utf-8"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(credentials.user, credentials.password)
            server.sendmail(credentials.user, [to], msg.as_string())
        log.info("Email sent to %s", to)
        return msg["Message-ID"]


def get_mailer() -> Mailer:
    return Mailer()
