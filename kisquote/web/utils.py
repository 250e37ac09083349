"""Helpers shared by the web routes."""

from typing import NoReturn

from fastapi import HTTPException, Request

from kisquote.core.exceptions import ErrorCode
from kisquote.core.services import QuoteService

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str | None:
    """Return the caller supplied ``X-Request-ID`` header, if any."""
    return request.headers.get(REQUEST_ID_HEADER)


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def bad_request(code: ErrorCode, message: str) -> NoReturn:
    raise HTTPException(status_code=400, detail={"error": code.value, "message": message})
