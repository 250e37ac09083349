"""Exception handling module."""

from kisquote.core.exceptions.base import (
    AuthenticationError,
    ConfigurationError,
    QuoteError,
    UnknownError,
    UpstreamError,
)
from kisquote.core.exceptions.codes import ErrorCode
from kisquote.core.exceptions.handler import translate_exception

__all__ = [
    "QuoteError",
    "ConfigurationError",
    "AuthenticationError",
    "UpstreamError",
    "UnknownError",
    "ErrorCode",
    "translate_exception",
]
