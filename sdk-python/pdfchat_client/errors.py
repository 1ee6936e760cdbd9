"""Error classification for the request pipeline.

Everything here is pure: it maps a failed response (or an exception that
never produced one) to an ``ErrorResult``. Applying the 401 side effects is
the pipeline's job; ``SessionExpired`` only describes them.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .models import ErrorResult, SessionExpired

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please login again."
GENERIC_ERROR_MESSAGE = "An error occurred"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

# message_type values produced by the client itself.
# Anything else seen by callers was passed through from the server.
MESSAGE_TYPES = {
    "invalid_credentials": "HTTP 401, stored token cleared and login requested",
    "error": "Server error response without its own message_type",
    "unexpected_error": "Failure outside the HTTP layer (network, decoding, ...)",
}


class ApiError(Exception):
    """Raised by every pipeline call that does not succeed."""

    def __init__(self, result: ErrorResult):
        super().__init__(result.error_message)
        self.result = result

    @property
    def error_message(self) -> str:
        return self.result.error_message

    @property
    def message_type(self) -> str:
        return self.result.message_type

    @property
    def session_expired(self) -> bool:
        return isinstance(self.result, SessionExpired)

    def to_dict(self) -> Dict[str, Any]:
        return self.result.to_dict()


def session_expired() -> SessionExpired:
    return SessionExpired(error_message=SESSION_EXPIRED_MESSAGE, message_type="invalid_credentials")


def unexpected_error() -> ErrorResult:
    return ErrorResult(error_message=UNEXPECTED_ERROR_MESSAGE, message_type="unexpected_error")


def classify_http_error(status_code: int, body: Optional[Any]) -> ErrorResult:
    """Map an error response to an ErrorResult.

    ``body`` is the decoded JSON body, or None when it was empty or not JSON.
    Empty strings from the server count as missing and get the generic text.
    """
    if status_code == 401:
        return session_expired()

    error_message = None
    message_type = None
    if isinstance(body, dict):
        error_message = body.get("error_message")
        message_type = body.get("message_type")

    return ErrorResult(
        error_message=str(error_message) if error_message else GENERIC_ERROR_MESSAGE,
        message_type=str(message_type) if message_type else "error",
    )
