"""High level quote service shared by the web API and the CLI."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from kisquote.core.config.settings import AppConfig
from kisquote.core.data import catalog
from kisquote.core.data.providers.base import QuoteClient
from kisquote.core.data.proxies import ProxyMapping, default_proxy_mapping
from kisquote.core.logging import get_logger
from kisquote.core.models import (
    BatchRequest,
    BatchResult,
    EtfCategory,
    InstrumentClass,
    InstrumentRef,
    Market,
    Quote,
    StockSector,
)
from kisquote.core.monitoring import MetricsCollector
from kisquote.core.services.aggregator import ResultAggregator
from kisquote.core.services.batch_fetcher import RateLimitedBatchFetcher, Sleep
from kisquote.core.services.index_fallback import IndexFallbackEstimator
from kisquote.core.services.resolver import PriceResolver

logger = get_logger(__name__)


def describe_quote(quote: Quote) -> dict[str, Any]:
    """JSON-ready quote enriched with catalog metadata (name, category, sector)."""
    payload = quote.model_dump(mode="json")
    symbol = quote.instrument.symbol
    if quote.instrument.market is Market.KRX and not quote.instrument.is_index:
        etf = catalog.find_etf(symbol)
        if etf is not None:
            payload.update(name=etf.name, category=etf.category.value, issuer=etf.issuer)
    elif not quote.instrument.is_index:
        stock = catalog.find_us_stock(symbol)
        if stock is not None:
            payload.update(name=stock.name, sector=stock.sector.value, exchange=stock.exchange.value)
    return payload


def batch_payload(result: BatchResult, **extra: Any) -> dict[str, Any]:
    """``{data, failed, timestamp}`` with enriched quotes plus ``extra`` keys."""
    payload = result.to_payload()
    payload["data"] = [describe_quote(quote) for quote in result.succeeded]
    payload.update(extra)
    return payload


class QuoteService:
    """Wire resolver, estimator, fetcher and aggregator around one client."""

    def __init__(
        self,
        client: QuoteClient,
        config: AppConfig | None = None,
        *,
        proxies: ProxyMapping | None = None,
        metrics: MetricsCollector | None = None,
        sleep: Sleep | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client
        self.config = config or AppConfig()
        if proxies is None:
            proxies = (
                ProxyMapping.from_entries(self.config.proxies) if self.config.proxies else default_proxy_mapping()
            )

        self.resolver = PriceResolver(client, call_timeout=self.config.batch.call_timeout)
        self.estimator = IndexFallbackEstimator(self.resolver, proxies, metrics=metrics)
        fetcher_kwargs: dict[str, Any] = {"metrics": metrics}
        if sleep is not None:
            fetcher_kwargs["sleep"] = sleep
        self.fetcher = RateLimitedBatchFetcher(self.resolver, self.estimator, **fetcher_kwargs)
        self.aggregator = ResultAggregator(clock) if clock else ResultAggregator()

    async def fetch_batch(
        self,
        instruments: Iterable[InstrumentRef],
        *,
        chunk_size: int | None = None,
        inter_chunk_delay: float | None = None,
    ) -> BatchResult:
        """Fetch every instrument; per-instrument failures land in ``failed``.

        Raises:
            ConfigurationError: credentials are missing
            AuthenticationError: no access token could be obtained
        """
        request = BatchRequest(
            instruments=tuple(instruments),
            chunk_size=chunk_size or self.config.batch.chunk_size,
            inter_chunk_delay=self.config.batch.etf_delay if inter_chunk_delay is None else inter_chunk_delay,
        )
        await self.client.ensure_ready()

        outcomes = await self.fetcher.fetch_all(request)
        result = self.aggregator.aggregate(outcomes, request.instruments)
        logger.info(
            f"Batch completed: {len(result.succeeded)} succeeded, {len(result.failed)} failed "
            f"of {len(request.instruments)}"
        )
        return result

    async def fetch_etf_prices(self, category: EtfCategory | str = catalog.ALL_CATEGORY) -> BatchResult:
        etfs = catalog.etfs_by_category(category)
        return await self.fetch_batch(
            (etf.ref for etf in etfs), inter_chunk_delay=self.config.batch.etf_delay
        )

    async def fetch_us_indices(self) -> BatchResult:
        return await self.fetch_batch(
            (index.ref for index in catalog.US_INDICES), inter_chunk_delay=self.config.batch.etf_delay
        )

    async def fetch_us_stocks(self, sector: StockSector | str | None = None) -> BatchResult:
        stocks = catalog.stocks_by_sector(sector)
        return await self.fetch_batch(
            (stock.ref for stock in stocks), inter_chunk_delay=self.config.batch.overseas_delay
        )

    async def fetch_stock(self, symbol: str) -> Quote:
        return await self.resolver.resolve(InstrumentRef(symbol=symbol, market=Market.KRX))

    async def fetch_domestic_index(self, code: str) -> Quote:
        if code not in catalog.DOMESTIC_INDEX_NAMES:
            raise ValueError(f"unknown domestic index code: {code}")
        ref = InstrumentRef(symbol=code, market=Market.KRX, instrument_class=InstrumentClass.INDEX)
        return await self.resolver.resolve(ref)

    async def fetch_overseas_stock(self, symbol: str, exchange: Market | str | None = None) -> Quote:
        """Quote one overseas stock; the exchange defaults to the catalog entry, then NASDAQ."""
        if exchange is None:
            known = catalog.find_us_stock(symbol)
            market = known.exchange if known else Market.NAS
        else:
            market = Market(exchange)
        if market.is_domestic or market is Market.US:
            raise ValueError(f"{market.value} is not an overseas exchange")
        return await self.resolver.resolve(InstrumentRef(symbol=symbol, market=market))


__all__ = ["QuoteService", "batch_payload", "describe_quote"]
