"""Exception hierarchy for TikTok Open API failures.

Provides specific exception types for envelope errors, transport failures,
and authorization callback problems so callers can handle each precisely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tiktok_open_api.models.envelope import ErrorEnvelope


class TikTokError(Exception):
    """Base exception for all TikTok client errors."""

    pass


class ConfigurationError(TikTokError):
    """Raised when required credentials or settings are missing."""

    pass


class ApiError(TikTokError):
    """Raised when the platform answers with a non-"ok" error envelope.

    Carries the platform log id so failures can be correlated with
    TikTok support.
    """

    description = "The TikTok API returned an error."

    def __init__(self, code: str, message: str = "", log_id: str = ""):
        self.code = code
        self.message = message
        self.log_id = log_id
        super().__init__(self._render())

    def _render(self) -> str:
        return f"{self.description} Log ID: {self.log_id}"


class AccessTokenInvalidError(ApiError):
    description = (
        "Access token is invalid or not found in the request. "
        "Please refresh the token and retry."
    )


class InternalServerError(ApiError):
    description = (
        "TikTok internal error. Please refer to the error message for details "
        "and notify TikTok support."
    )


class InvalidFileUploadError(ApiError):
    description = (
        "The uploaded file does not meet API specifications. "
        "Please correct the file and try again."
    )


class InvalidParamsError(ApiError):
    description = (
        "One or more fields in request is invalid. "
        "Please refer to the error message for details."
    )


class RateLimitExceededError(ApiError):
    description = "The API rate limit was exceeded. Please try again later."


class ScopeNotAuthorizedError(ApiError):
    description = (
        "The user did not authorize the scope required for completing this "
        "request. Please ask the user to authorize and then retry."
    )


class ScopePermissionMissedError(ApiError):
    description = (
        "Access token is invalid, some fields need additional scopes. "
        "Please refer to the error message for more details."
    )


class UnknownApiError(ApiError):
    """Raised for error codes outside the documented taxonomy."""

    def _render(self) -> str:
        return (
            f"Unknown error occurred. Code: {self.code}, "
            f"Message: {self.message}, Log ID: {self.log_id}"
        )


class TransportError(TikTokError):
    """Base exception for failures below the API envelope."""

    pass


class RequestFailedError(TransportError):
    """Raised when the HTTP request could not be sent."""

    pass


class ResponseReadError(TransportError):
    """Raised when the response body could not be read."""

    pass


class ResponseParseError(TransportError):
    """Raised when the response body is not the expected JSON shape."""

    pass


class AuthorizationError(TikTokError):
    """Raised when the authorization redirect cannot be accepted."""

    pass


class CsrfMismatchError(AuthorizationError):
    """Raised when the callback state does not match the issued CSRF state.

    This indicates either a forged callback or a callback that belongs to
    a different authorization attempt.
    """

    pass


class AuthorizationDeniedError(AuthorizationError):
    """Raised when the callback reports an error instead of a code."""

    def __init__(self, error: str, description: str | None = None):
        self.error = error
        self.description = description
        super().__init__(
            f"Authorization failed. Error: {error}. "
            f"Description: {description or 'none'}"
        )


class MalformedCallbackError(AuthorizationError):
    """Raised when the callback carries neither a usable code nor an error."""

    pass


_ERRORS_BY_CODE: dict[str, type[ApiError]] = {
    "access_token_invalid": AccessTokenInvalidError,
    "internal_error": InternalServerError,
    "invalid_file_upload": InvalidFileUploadError,
    "invalid_params": InvalidParamsError,
    "rate_limit_exceeded": RateLimitExceededError,
    "scope_not_authorized": ScopeNotAuthorizedError,
    "scope_permission_missed": ScopePermissionMissedError,
}


def error_from_envelope(envelope: ErrorEnvelope) -> ApiError:
    """Map an error envelope to its typed exception."""
    error_cls = _ERRORS_BY_CODE.get(envelope.code, UnknownApiError)
    return error_cls(envelope.code, envelope.message, envelope.log_id)
