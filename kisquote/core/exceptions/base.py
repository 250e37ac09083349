"""kisquote core exception classes."""

from typing import Any

from kisquote.core.exceptions.codes import ErrorCode
from kisquote.core.models.batch import ErrorKind


class QuoteError(Exception):
    """Base class for every failure the quote layer reports."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    status_code: int = 500
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the error.

        Args:
            message: human readable message
            error_code: wire code, defaults to the class code
            details: extra context (symbol, upstream message code, ...)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error_code.value, "message": self.message}
        upstream_code = self.details.get("msg_cd")
        if upstream_code:
            payload["code"] = upstream_code
        return payload


class ConfigurationError(QuoteError):
    """Credentials or API key are absent. Fatal to the whole process."""

    kind = ErrorKind.CONFIGURATION
    status_code = 500
    default_code = ErrorCode.API_KEY_NOT_CONFIGURED


class AuthenticationError(QuoteError):
    """Access token invalid, expired or could not be issued."""

    kind = ErrorKind.AUTHENTICATION
    status_code = 401
    default_code = ErrorCode.AUTHENTICATION_ERROR


class UpstreamError(QuoteError):
    """The quote provider answered with an application-level error."""

    kind = ErrorKind.UPSTREAM
    status_code = 502
    default_code = ErrorCode.KIS_API_ERROR

    def __init__(
        self,
        message: str,
        msg_cd: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if msg_cd:
            super_details["msg_cd"] = msg_cd
        super().__init__(message, None, super_details)
        self.msg_cd = msg_cd


class UnknownError(QuoteError):
    """Catch-all, including transport faults and timeouts."""

    kind = ErrorKind.UNKNOWN
    status_code = 500
    default_code = ErrorCode.INTERNAL_ERROR


__all__ = [
    "QuoteError",
    "ConfigurationError",
    "AuthenticationError",
    "UpstreamError",
    "UnknownError",
]
