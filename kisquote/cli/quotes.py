"""Quote commands for the kisquote CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import typer

from kisquote.core.config import ConfigManager
from kisquote.core.data import catalog
from kisquote.core.data.providers import KISQuoteClient
from kisquote.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    QuoteError,
    UpstreamError,
)
from kisquote.core.models import BatchResult
from kisquote.core.services import QuoteService, describe_quote

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import emit_error, prepare_output, report_failures

quotes_app = typer.Typer(help="Current quotes for the built-in instrument lists.")

DEFAULT_COLUMNS = [
    "symbol",
    "market",
    "name",
    "current_value",
    "change",
    "change_percent",
    "is_estimated",
    "observed_at",
]

_PROVIDER_ERRORS = (ConfigurationError, AuthenticationError, UpstreamError)


def register(app: typer.Typer) -> None:
    """Register the quotes command group on the provided application."""

    app.add_typer(quotes_app, name="quotes", help="Fetch current quotes")


def get_quote_service() -> QuoteService:
    """Factory hook for obtaining a :class:`QuoteService` instance."""

    config = ConfigManager().get_config()
    return QuoteService(KISQuoteClient(config.kis), config)


@quotes_app.command("etf")
def etf_command(
    ctx: typer.Context,
    category: str = typer.Option(catalog.ALL_CATEGORY, "--category", "-c", help="all, index, leverage, sector, overseas, bond."),
) -> None:
    """Fetch Korean ETF prices."""

    _run(ctx, lambda service: service.fetch_etf_prices(category.strip().lower()))


@quotes_app.command("indices")
def indices_command(ctx: typer.Context) -> None:
    """Fetch US index values, estimating unsupported ones from proxy ETFs."""

    _run(ctx, lambda service: service.fetch_us_indices())


@quotes_app.command("stocks")
def stocks_command(
    ctx: typer.Context,
    sector: str = typer.Option(catalog.ALL_CATEGORY, "--sector", "-s", help="all or a sector such as tech, finance."),
) -> None:
    """Fetch US large-cap stock prices."""

    _run(ctx, lambda service: service.fetch_us_stocks(sector.strip().lower()))


def _run(ctx: typer.Context, fetch: Callable[[QuoteService], Awaitable[BatchResult]]) -> None:
    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        service = get_quote_service()
        result = asyncio.run(_fetch_and_close(service, fetch))
    except ValueError as error:
        stack.close()
        emit_error(str(error), "VALIDATION_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    except _PROVIDER_ERRORS as error:
        stack.close()
        emit_error(error.message, error.error_code.value, details=error.details)
        raise typer.Exit(code=PROVIDER_EXIT_CODE) from error
    except QuoteError as error:
        stack.close()
        emit_error(error.message, error.error_code.value, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error
    except Exception as error:  # pragma: no cover - safety net
        stack.close()
        emit_error(str(error), "UNEXPECTED_ERROR")
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error

    try:
        formatter.render(_result_to_rows(result), stream=stream, columns=DEFAULT_COLUMNS)
    finally:
        stack.close()
    report_failures(result)


async def _fetch_and_close(
    service: QuoteService, fetch: Callable[[QuoteService], Awaitable[BatchResult]]
) -> BatchResult:
    try:
        return await fetch(service)
    finally:
        await service.client.aclose()


def _result_to_rows(result: BatchResult) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for quote in result.succeeded:
        payload = describe_quote(quote)
        rows.append(
            {
                "symbol": quote.instrument.symbol,
                "market": quote.instrument.market.value,
                "name": payload.get("name", quote.label),
                "current_value": payload["current_value"],
                "change": payload["change"],
                "change_percent": payload["change_percent"],
                "is_estimated": quote.is_estimated,
                "observed_at": payload["observed_at"],
            }
        )
    return rows
