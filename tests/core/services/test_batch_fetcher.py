"""Tests for the chunked batch fetcher."""

from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import FakeQuoteClient, raw
from kisquote.core.exceptions import AuthenticationError
from kisquote.core.models import BatchRequest, ErrorKind, Failure, InstrumentClass, InstrumentRef, Market, Success
from kisquote.core.services import PriceResolver, RateLimitedBatchFetcher


def _refs(count: int) -> list[InstrumentRef]:
    return [InstrumentRef(symbol=f"{100000 + i}", market=Market.KRX) for i in range(count)]


def _client_for(refs: list[InstrumentRef], **kwargs) -> FakeQuoteClient:
    return FakeQuoteClient({str(ref): raw(str(1000 + i)) for i, ref in enumerate(refs)}, **kwargs)


def _fetcher(client: FakeQuoteClient, metrics, sleep) -> RateLimitedBatchFetcher:
    return RateLimitedBatchFetcher(PriceResolver(client), sleep=sleep, metrics=metrics)


@pytest.mark.asyncio
@pytest.mark.parametrize(("count", "chunk_size", "expected_sleeps"), [(0, 10, 0), (10, 10, 0), (11, 10, 1), (25, 10, 2)])
async def test_sleeps_between_chunks_only(metrics, recording_sleep, count, chunk_size, expected_sleeps) -> None:
    refs = _refs(count)
    request = BatchRequest(instruments=refs, chunk_size=chunk_size, inter_chunk_delay=0.1)

    outcomes = await _fetcher(_client_for(refs), metrics, recording_sleep).fetch_all(request)

    assert len(outcomes) == count
    assert recording_sleep.delays == [0.1] * expected_sleeps
    assert metrics.registry.get_sample_value("kisquote_batch_chunks_total") == float(-(-count // chunk_size))


@pytest.mark.asyncio
async def test_outcomes_follow_request_order_regardless_of_latency(metrics, recording_sleep) -> None:
    refs = _refs(4)
    delays = {str(refs[0]): 0.03, str(refs[1]): 0.0, str(refs[2]): 0.02, str(refs[3]): 0.01}
    client = _client_for(refs, delays=delays)

    outcomes = await _fetcher(client, metrics, recording_sleep).fetch_all(BatchRequest(instruments=refs))

    assert [outcome.instrument for outcome in outcomes] == refs


@pytest.mark.asyncio
async def test_failures_are_isolated(metrics, recording_sleep) -> None:
    refs = _refs(10)
    client = _client_for(refs)
    client.responses[str(refs[3])] = AuthenticationError("expired")
    client.responses[str(refs[7])] = RuntimeError("socket closed")

    outcomes = await _fetcher(client, metrics, recording_sleep).fetch_all(
        BatchRequest(instruments=refs, chunk_size=4)
    )

    assert len(outcomes) == 10
    failures = [outcome for outcome in outcomes if isinstance(outcome, Failure)]
    assert [(failure.instrument, failure.error_kind) for failure in failures] == [
        (refs[3], ErrorKind.AUTHENTICATION),
        (refs[7], ErrorKind.UNKNOWN),
    ]
    assert sum(isinstance(outcome, Success) for outcome in outcomes) == 8
    assert len(client.calls) == 10
    assert metrics.registry.get_sample_value(
        "kisquote_quote_outcomes_total", {"market": "KRX", "outcome": "authentication"}
    ) == 1.0


@pytest.mark.asyncio
async def test_chunks_run_sequentially(metrics, recording_sleep) -> None:
    refs = _refs(9)
    client = _client_for(refs, delays={str(ref): 0.01 for ref in refs})

    await _fetcher(client, metrics, recording_sleep).fetch_all(BatchRequest(instruments=refs, chunk_size=3))

    assert client.max_in_flight == 3
    assert client.calls == [str(ref) for ref in refs]


@pytest.mark.asyncio
async def test_index_instruments_go_through_estimator(metrics, recording_sleep) -> None:
    ccmp = InstrumentRef(symbol="CCMP", market=Market.US, instrument_class=InstrumentClass.INDEX)
    client = FakeQuoteClient({"US:CCMP": raw("0"), "NAS:QQQ": raw("620.00", "5.00", "0.81")})

    outcomes = await _fetcher(client, metrics, recording_sleep).fetch_all(BatchRequest(instruments=[ccmp]))

    assert isinstance(outcomes[0], Success)
    assert outcomes[0].quote.is_estimated is True
    assert outcomes[0].quote.current_value == Decimal("21700.00")
