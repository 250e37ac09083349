"""Pytest configuration for the kisquote test suite."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from prometheus_client import CollectorRegistry

from kisquote.core.data.providers.base import QuoteClient, RawQuote
from kisquote.core.exceptions import UpstreamError
from kisquote.core.models import InstrumentRef
from kisquote.core.monitoring import MetricsCollector

OBSERVED_AT = datetime(2025, 1, 2, 6, 30, tzinfo=timezone.utc)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--kisquote-run-integration",
        action="store_true",
        default=False,
        help="Run kisquote integration tests that call the live KIS Open API.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks kisquote tests requiring network access and KIS credentials",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--kisquote-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --kisquote-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def raw(value: str, change: str = "0", change_percent: str = "0", label: str | None = None) -> RawQuote:
    return RawQuote(
        current_value=Decimal(value),
        change=Decimal(change),
        change_percent=Decimal(change_percent),
        observed_at=OBSERVED_AT,
        label=label,
    )


class FakeQuoteClient(QuoteClient):
    """In-memory client keyed by ``"MARKET:SYMBOL"``.

    Values are :class:`RawQuote` objects or exceptions to raise. Unknown
    instruments raise :class:`UpstreamError`.
    """

    def __init__(
        self,
        responses: dict[str, RawQuote | BaseException] | None = None,
        *,
        delays: dict[str, float] | None = None,
        ready_error: BaseException | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.ready_error = ready_error
        self.calls: list[str] = []
        self.ready_calls = 0
        self.closed = False
        self.in_flight = 0
        self.max_in_flight = 0

    async def ensure_ready(self) -> None:
        self.ready_calls += 1
        if self.ready_error is not None:
            raise self.ready_error

    async def aclose(self) -> None:
        self.closed = True

    async def get_quote(self, instrument: InstrumentRef) -> RawQuote:
        key = str(instrument)
        self.calls.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(key)
            if delay:
                await asyncio.sleep(delay)
            response = self.responses.get(key)
            if response is None:
                raise UpstreamError(f"no data for {key}", msg_cd="TEST0001")
            if isinstance(response, BaseException):
                raise response
            return response
        finally:
            self.in_flight -= 1


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
