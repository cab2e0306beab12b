"""Service-layer exceptions, translated to HTTP responses in ``app.main``."""
from __future__ import annotations


class JobBoardError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(JobBoardError):
    """One or more form fields were rejected; ``errors`` maps field name to message."""

    status_code = 422

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Validation failed")
        self.errors = errors


class NotFound(JobBoardError):
    status_code = 404

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier


class PermissionDenied(JobBoardError):
    status_code = 403


class AuthenticationRequired(JobBoardError):
    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class RelayFailure(JobBoardError):
    """An email or push relay could not deliver its message."""

    status_code = 500


class Conflict(JobBoardError):
    status_code = 409
