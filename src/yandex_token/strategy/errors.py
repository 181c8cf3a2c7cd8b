from __future__ import annotations

import enum

PROFILE_FETCH_FAILED = "Failed to fetch user profile"


class ErrorKind(str, enum.Enum):
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"
    VERIFICATION_REJECTED = "verification_rejected"
    VERIFICATION_ERROR = "verification_error"


class InternalOAuthError(Exception):
    """The provider could not be reached or rejected the profile request."""

    def __init__(self, message: str, status_code: int | None = None, oauth_error: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.oauth_error = oauth_error

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


def wrap_fetch_error(exc: BaseException) -> InternalOAuthError:
    return InternalOAuthError(PROFILE_FETCH_FAILED, status_code=getattr(exc, "status_code", None), oauth_error=exc)


def classify_error(exc: BaseException) -> ErrorKind:
    """Kind of a failure raised while fetching or normalizing the profile."""
    if isinstance(exc, InternalOAuthError):
        return ErrorKind.TRANSPORT_FAILURE
    return ErrorKind.MALFORMED_RESPONSE
