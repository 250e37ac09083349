"""Translation of arbitrary failures into the quote error taxonomy."""

from __future__ import annotations

import asyncio
import json

import httpx

from kisquote.core.exceptions.base import (
    AuthenticationError,
    QuoteError,
    UnknownError,
)

_AUTH_STATUS_CODES = frozenset({401, 403})


def translate_exception(error: BaseException, *, symbol: str | None = None) -> QuoteError:
    """Map ``error`` onto one of the typed quote errors.

    Typed errors pass through unchanged. HTTP 401/403 become
    :class:`AuthenticationError`; everything else, including transport
    faults, timeouts and malformed JSON, becomes :class:`UnknownError`.
    """

    if isinstance(error, QuoteError):
        return error

    details: dict[str, object] = {"error_type": type(error).__name__}
    if symbol:
        details["symbol"] = symbol

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        details["status_code"] = status
        if status in _AUTH_STATUS_CODES:
            return AuthenticationError(f"Upstream rejected credentials ({status})", details=details)
        return UnknownError(f"Upstream returned HTTP {status}", details=details)

    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
        return UnknownError("Upstream request timed out", details=details)

    if isinstance(error, httpx.HTTPError):
        return UnknownError(f"Transport error: {error}", details=details)

    if isinstance(error, (json.JSONDecodeError, ValueError, KeyError, TypeError)):
        return UnknownError(f"Malformed upstream response: {error}", details=details)

    return UnknownError(str(error) or type(error).__name__, details=details)


__all__ = ["translate_exception"]
