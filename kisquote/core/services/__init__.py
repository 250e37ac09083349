"""Quote retrieval services."""

from kisquote.core.services.aggregator import ResultAggregator
from kisquote.core.services.batch_fetcher import RateLimitedBatchFetcher
from kisquote.core.services.index_fallback import IndexFallbackEstimator, estimate_from_proxy
from kisquote.core.services.quotes import QuoteService, batch_payload, describe_quote
from kisquote.core.services.resolver import PriceResolver

__all__ = [
    "IndexFallbackEstimator",
    "PriceResolver",
    "QuoteService",
    "RateLimitedBatchFetcher",
    "ResultAggregator",
    "batch_payload",
    "describe_quote",
    "estimate_from_proxy",
]
