"""Chunked, rate-limited batch retrieval."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from kisquote.core.exceptions import QuoteError
from kisquote.core.logging import get_logger
from kisquote.core.models import (
    BatchRequest,
    ErrorKind,
    Failure,
    InstrumentRef,
    Outcome,
    Success,
)
from kisquote.core.monitoring import MetricsCollector, get_metrics_collector
from kisquote.core.services.index_fallback import IndexFallbackEstimator
from kisquote.core.services.resolver import PriceResolver

Sleep = Callable[[float], Awaitable[None]]

logger = get_logger(__name__)


class RateLimitedBatchFetcher:
    """Resolve a batch chunk by chunk, pausing between chunks.

    Instruments in one chunk are resolved concurrently; the next chunk
    starts only after every call of the current chunk has settled. Each
    instrument yields exactly one outcome, in request order.
    """

    def __init__(
        self,
        resolver: PriceResolver,
        estimator: IndexFallbackEstimator | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.resolver = resolver
        self.metrics = metrics
        self.estimator = estimator or IndexFallbackEstimator(resolver, metrics=metrics)
        self._sleep = sleep

    @property
    def _collector(self) -> MetricsCollector:
        return self.metrics or get_metrics_collector()

    async def fetch_all(self, request: BatchRequest) -> list[Outcome]:
        chunks = request.chunks()
        outcomes: list[Outcome] = []

        for position, chunk in enumerate(chunks, start=1):
            self._collector.record_chunk()
            results = await asyncio.gather(*(self._fetch_one(instrument) for instrument in chunk))
            outcomes.extend(results)

            failed = sum(1 for outcome in results if isinstance(outcome, Failure))
            logger.debug(f"Chunk {position}/{len(chunks)} settled: {len(results) - failed} ok, {failed} failed")

            if position < len(chunks):
                await self._sleep(request.inter_chunk_delay)

        return outcomes

    async def _fetch_one(self, instrument: InstrumentRef) -> Outcome:
        started = time.perf_counter()
        try:
            if instrument.is_index:
                quote = await self.estimator.resolve_index(instrument)
            else:
                quote = await self.resolver.resolve(instrument)
        except QuoteError as e:
            return self._failure(instrument, e.kind, e.message, started)
        except Exception as e:
            return self._failure(instrument, ErrorKind.UNKNOWN, str(e) or type(e).__name__, started)

        self._collector.observe_outcome(instrument.market.value, "success", time.perf_counter() - started)
        return Success(instrument=instrument, quote=quote)

    def _failure(self, instrument: InstrumentRef, kind: ErrorKind, message: str, started: float) -> Failure:
        self._collector.observe_outcome(instrument.market.value, kind.value, time.perf_counter() - started)
        logger.bind(instrument=str(instrument), error_code=kind.value).warning(f"Quote failed: {message}")
        return Failure(instrument=instrument, error_kind=kind, message=message)


__all__ = ["RateLimitedBatchFetcher", "Sleep"]
