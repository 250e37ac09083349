"""Wire-level error codes returned to HTTP and CLI callers."""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error identifiers."""

    API_KEY_NOT_CONFIGURED = "API_KEY_NOT_CONFIGURED"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    KIS_API_ERROR = "KIS_API_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    INVALID_SECTOR = "INVALID_SECTOR"
    MISSING_INDEX_CODE = "MISSING_INDEX_CODE"
    INVALID_INDEX_CODE = "INVALID_INDEX_CODE"
    INVALID_EXCHANGE = "INVALID_EXCHANGE"
    MISSING_SYMBOL = "MISSING_SYMBOL"


__all__ = ["ErrorCode"]
