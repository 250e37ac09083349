"""Tests for partitioning outcomes into batch results."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from kisquote.core.models import ErrorKind, Failure, InstrumentRef, Market, Quote, Success
from kisquote.core.services import ResultAggregator

FIXED_NOW = datetime(2025, 1, 2, 7, 0, tzinfo=timezone.utc)


def _ref(symbol: str) -> InstrumentRef:
    return InstrumentRef(symbol=symbol, market=Market.NAS)


def _success(symbol: str, value: str = "100") -> Success:
    ref = _ref(symbol)
    return Success(ref, Quote(instrument=ref, current_value=Decimal(value), label=symbol, observed_at=FIXED_NOW))


def test_partition_is_complete_and_ordered() -> None:
    refs = [_ref(s) for s in ("AAPL", "MSFT", "NVDA", "TSLA")]
    outcomes = [
        _success("AAPL"),
        Failure(refs[1], ErrorKind.UPSTREAM, "closed"),
        _success("NVDA"),
        Failure(refs[3], ErrorKind.UNKNOWN, "timeout"),
    ]

    result = ResultAggregator(lambda: FIXED_NOW).aggregate(outcomes, refs)

    assert [quote.instrument.symbol for quote in result.succeeded] == ["AAPL", "NVDA"]
    assert list(result.failed) == [refs[1], refs[3]]
    assert result.total == len(refs)
    assert result.observed_at == FIXED_NOW
    assert [failure.error_kind for failure in result.failures] == [ErrorKind.UPSTREAM, ErrorKind.UNKNOWN]


def test_failed_list_follows_input_order_not_outcome_order() -> None:
    refs = [_ref("AAPL"), _ref("MSFT")]
    outcomes = [Failure(refs[1], ErrorKind.UNKNOWN), Failure(refs[0], ErrorKind.UNKNOWN)]

    result = ResultAggregator(lambda: FIXED_NOW).aggregate(outcomes, refs)

    assert list(result.failed) == refs


def test_duplicates_are_counted_per_occurrence() -> None:
    aapl = _ref("AAPL")
    outcomes = [_success("AAPL", "190"), Failure(aapl, ErrorKind.UNKNOWN, "timeout")]

    result = ResultAggregator(lambda: FIXED_NOW).aggregate(outcomes, [aapl, aapl])

    assert len(result.succeeded) == 1
    assert list(result.failed) == [aapl]


def test_missing_outcome_is_reported_as_failed() -> None:
    refs = [_ref("AAPL"), _ref("MSFT")]

    result = ResultAggregator(lambda: FIXED_NOW).aggregate([_success("AAPL")], refs)

    assert list(result.failed) == [refs[1]]
    assert result.failures[0].error_kind is ErrorKind.UNKNOWN


def test_aggregation_is_idempotent() -> None:
    refs = [_ref("AAPL"), _ref("MSFT")]
    outcomes = [_success("AAPL"), Failure(refs[1], ErrorKind.UPSTREAM)]
    aggregator = ResultAggregator(lambda: FIXED_NOW)

    assert aggregator.aggregate(outcomes, refs) == aggregator.aggregate(outcomes, refs)


def test_payload_shape() -> None:
    refs = [_ref("AAPL"), _ref("MSFT")]
    result = ResultAggregator(lambda: FIXED_NOW).aggregate([_success("AAPL", "190.5")], refs)

    payload = result.to_payload()

    assert payload["timestamp"] == FIXED_NOW.isoformat()
    assert payload["data"][0]["current_value"] == "190.5"
    assert payload["data"][0]["instrument"] == {"symbol": "AAPL", "market": "NAS", "instrument_class": "equity"}
    assert payload["failed"] == [{"symbol": "MSFT", "market": "NAS", "instrument_class": "equity"}]
