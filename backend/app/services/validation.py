from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]+$")
SALARY_PATTERN = re.compile(r"^\$?\d+([kK])?(-\$?\d+([kK])?)?$")

JOB_TYPES = ("full-time", "part-time", "contract", "internship")
APPLICATION_STATUSES = ("pending", "accepted", "rejected")
KNOWN_CATEGORIES = (
    "business",
    "technology",
    "marketing",
    "design",
    "sales",
    "customer service",
    "finance",
    "healthcare",
    "education",
    "engineering",
    "human resources",
    "retail",
    "manufacturing",
)


def is_valid_url(value: str) -> bool:
    """True when ``value`` parses as an absolute URL (a scheme plus a host or path)."""
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    if not parsed.scheme or not re.fullmatch(r"[A-Za-z][A-Za-z0-9+.-]*", parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


def validate_application_form(form: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not _text(form, "full_name"):
        errors["full_name"] = "Full name is required"

    email = _text(form, "email")
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Email is not valid"

    phone = _text(form, "phone")
    if not phone:
        errors["phone"] = "Phone number is required"
    elif not PHONE_PATTERN.match(phone):
        errors["phone"] = "Phone number must be numeric"

    if not _text(form, "experience"):
        errors["experience"] = "Experience is required"

    resume_link = _text(form, "resume_link")
    if not resume_link:
        errors["resume_link"] = "Resume link is required"
    elif not is_valid_url(resume_link):
        errors["resume_link"] = "Please enter a valid URL"

    return errors


def validate_job_form(form: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}

    if _text(form, "job_type") not in JOB_TYPES:
        errors["job_type"] = "Please select a job type"
    if not 5 <= len(_text(form, "title")) <= 100:
        errors["title"] = "Job title must be between 5 and 100 characters"
    if not 2 <= len(_text(form, "company")) <= 50:
        errors["company"] = "Company name must be between 2 and 50 characters"
    if not 2 <= len(_text(form, "location")) <= 50:
        errors["location"] = "Location must be between 2 and 50 characters"
    if not SALARY_PATTERN.match(_text(form, "salary")):
        errors["salary"] = "Enter a valid salary range (e.g. 50k-80k or $50000-$80000)"
    if not 50 <= len(_text(form, "description")) <= 5000:
        errors["description"] = "Description must be between 50 and 5000 characters"
    if not _text(form, "category"):
        errors["category"] = "Please select a business category"

    return errors


def _text(form: dict[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()
