"""
Health check route.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from kisquote import __version__
from kisquote.core.services import QuoteService
from kisquote.web.models import HealthResponse
from kisquote.web.utils import get_quote_service

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(service: QuoteService = Depends(get_quote_service)) -> HealthResponse:
    """Liveness plus whether upstream credentials are configured. Never calls upstream."""
    kis_config = getattr(service.client, "config", None)
    configured = bool(kis_config and getattr(kis_config, "has_credentials", False))
    return HealthResponse(
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        credentials_configured=configured,
    )
