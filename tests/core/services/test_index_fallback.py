"""Tests for proxy-based index estimation."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from conftest import OBSERVED_AT, FakeQuoteClient, raw
from kisquote.core.data.providers.base import RawQuote
from kisquote.core.data.proxies import ProxyMapping, ProxyRule
from kisquote.core.exceptions import AuthenticationError, UnknownError
from kisquote.core.models import InstrumentClass, InstrumentRef, Market
from kisquote.core.services import IndexFallbackEstimator, PriceResolver

SPX = InstrumentRef(symbol="SPX", market=Market.US, instrument_class=InstrumentClass.INDEX)
CCMP = InstrumentRef(symbol="CCMP", market=Market.US, instrument_class=InstrumentClass.INDEX)
PROXY_OBSERVED_AT = datetime(2025, 1, 2, 6, 31, tzinfo=timezone.utc)


def _estimator(client: FakeQuoteClient, metrics, proxies: ProxyMapping | None = None) -> IndexFallbackEstimator:
    return IndexFallbackEstimator(PriceResolver(client), proxies, metrics=metrics)


@pytest.mark.asyncio
async def test_positive_index_value_is_returned_unchanged(metrics) -> None:
    client = FakeQuoteClient({"US:SPX": raw("5000.00", "12.5", "0.25", label="S&P 500")})

    quote = await _estimator(client, metrics).resolve_index(SPX)

    assert quote.current_value == Decimal("5000.00")
    assert quote.is_estimated is False
    assert client.calls == ["US:SPX"]


@pytest.mark.asyncio
async def test_zero_index_value_is_estimated_from_proxy(metrics) -> None:
    proxy_raw = RawQuote(
        current_value=Decimal("620.00"),
        change=Decimal("5.00"),
        change_percent=Decimal("0.81"),
        observed_at=PROXY_OBSERVED_AT,
    )
    client = FakeQuoteClient({"US:CCMP": raw("0"), "NAS:QQQ": proxy_raw})

    quote = await _estimator(client, metrics).resolve_index(CCMP)

    assert quote.instrument == CCMP
    assert quote.current_value == Decimal("21700.00")
    assert quote.change == Decimal("175.00")
    assert quote.change_percent == Decimal("0.81")
    assert quote.label == "NASDAQ 100"
    assert quote.is_estimated is True
    assert quote.observed_at == PROXY_OBSERVED_AT
    assert client.calls == ["US:CCMP", "NAS:QQQ"]
    assert metrics.registry.get_sample_value("kisquote_index_estimates_total", {"index": "CCMP"}) == 1.0


@pytest.mark.asyncio
async def test_estimate_rounds_half_up(metrics) -> None:
    proxies = ProxyMapping(
        {CCMP: ProxyRule(InstrumentRef(symbol="QQQ", market=Market.NAS), Decimal("1"), "NASDAQ 100")}
    )
    client = FakeQuoteClient({"US:CCMP": raw("0"), "NAS:QQQ": raw("2.345", "-0.125", "-5.06")})

    quote = await _estimator(client, metrics, proxies).resolve_index(CCMP)

    assert quote.current_value == Decimal("2.35")
    assert quote.change == Decimal("-0.13")


@pytest.mark.asyncio
async def test_proxy_failure_returns_unestimated_quote(metrics) -> None:
    client = FakeQuoteClient({"US:CCMP": raw("0", label="NASDAQ Composite"), "NAS:QQQ": UnknownError("boom")})

    quote = await _estimator(client, metrics).resolve_index(CCMP)

    assert quote.current_value == Decimal("0")
    assert quote.is_estimated is False
    assert quote.label == "NASDAQ Composite"
    assert quote.observed_at == OBSERVED_AT
    assert metrics.registry.get_sample_value("kisquote_index_estimates_total", {"index": "CCMP"}) is None


@pytest.mark.asyncio
async def test_missing_mapping_returns_degenerate_quote(metrics) -> None:
    client = FakeQuoteClient({"US:CCMP": raw("0")})

    quote = await _estimator(client, metrics, ProxyMapping()).resolve_index(CCMP)

    assert quote.current_value == Decimal("0")
    assert quote.is_estimated is False
    assert client.calls == ["US:CCMP"]


@pytest.mark.asyncio
async def test_primary_failure_propagates(metrics) -> None:
    client = FakeQuoteClient({"US:CCMP": AuthenticationError("expired"), "NAS:QQQ": raw("620")})

    with pytest.raises(AuthenticationError):
        await _estimator(client, metrics).resolve_index(CCMP)

    assert client.calls == ["US:CCMP"]


@pytest.mark.asyncio
async def test_non_index_instrument_is_rejected(metrics) -> None:
    with pytest.raises(ValueError):
        await _estimator(FakeQuoteClient(), metrics).resolve_index(InstrumentRef(symbol="QQQ", market=Market.NAS))
