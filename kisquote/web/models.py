"""
Web API response models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""

    error: str = Field(..., description="Wire error code, e.g. AUTHENTICATION_ERROR")
    message: str = Field(..., description="Human readable message")
    code: str | None = Field(None, description="Upstream message code when available")


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    timestamp: datetime
    credentials_configured: bool
