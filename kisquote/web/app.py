"""
FastAPI application factory and wiring.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from kisquote import __version__
from kisquote.core.config import AppConfig, ConfigManager
from kisquote.core.data.providers import KISQuoteClient
from kisquote.core.exceptions import ErrorCode, QuoteError
from kisquote.core.logging import configure_logging, get_logger, log_context
from kisquote.core.services import QuoteService
from kisquote.web.models import ErrorResponse
from kisquote.web.routes import health_router, metrics_router, quote_router
from kisquote.web.utils import REQUEST_ID_HEADER, get_request_id

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the quote service on startup unless one was injected."""
    owned = getattr(app.state, "quote_service", None) is None
    if owned:
        config: AppConfig = getattr(app.state, "config", None) or ConfigManager().get_config()
        configure_logging(level=config.logging.level, file_output=bool(config.logging.file), file_path=config.logging.file)
        app.state.config = config
        app.state.quote_service = QuoteService(KISQuoteClient(config.kis), config)
        logger.info("kisquote service started")

    yield

    if owned:
        await app.state.quote_service.client.aclose()
        app.state.quote_service = None


def create_app(service: QuoteService | None = None, config: AppConfig | None = None) -> FastAPI:
    """Create the FastAPI application.

    ``service`` short-circuits the startup wiring, which is how tests inject
    a service built on a fake client.
    """
    app = FastAPI(
        title="kisquote",
        description="Batch quote retrieval for Korean ETFs, US stocks and indices",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.quote_service = service
    app.state.config = config or (service.config if service else None)

    _setup_middleware(app)
    _setup_routes(app)
    _setup_exception_handlers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def request_context(request: Request, call_next: Any) -> Any:
        with log_context(trace_id=get_request_id(request), path=request.url.path) as trace_id:
            request.state.request_id = trace_id
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = trace_id
        return response


def _setup_routes(app: FastAPI) -> None:
    app.include_router(quote_router, prefix="/api/kis", tags=["quotes"])
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])


def _error_response(status_code: int, error: str, message: str, code: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuoteError)
    async def quote_exception_handler(request: Request, exc: QuoteError) -> JSONResponse:
        logger.bind(error_code=exc.error_code.value).error(f"{request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        if isinstance(exc.detail, dict):
            return JSONResponse(status_code=exc.status_code, content=exc.detail)
        return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(400, "VALIDATION_ERROR", str(exc.errors()))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error_response(500, ErrorCode.INTERNAL_ERROR.value, "Internal server error")
