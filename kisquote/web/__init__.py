"""
Web API module - FastAPI service.
"""

from kisquote.web.app import create_app
from kisquote.web.models import ErrorResponse, HealthResponse

__all__ = ["create_app", "ErrorResponse", "HealthResponse"]
