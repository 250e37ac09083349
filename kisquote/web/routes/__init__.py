"""
Web API routes.
"""

from kisquote.web.metrics import router as metrics_router
from kisquote.web.routes.health_routes import router as health_router
from kisquote.web.routes.quote_routes import router as quote_router

__all__ = ["health_router", "metrics_router", "quote_router"]
