"""Proxy-based estimation for index quotes the upstream cannot serve."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from kisquote.core.data.proxies import ProxyMapping, ProxyRule, default_proxy_mapping
from kisquote.core.exceptions import QuoteError
from kisquote.core.logging import get_logger
from kisquote.core.models import InstrumentRef, Quote
from kisquote.core.monitoring import MetricsCollector, get_metrics_collector
from kisquote.core.services.resolver import PriceResolver

ESTIMATE_QUANTUM = Decimal("0.01")

logger = get_logger(__name__)


def estimate_from_proxy(index_ref: InstrumentRef, proxy_quote: Quote, rule: ProxyRule) -> Quote:
    """Scale ``proxy_quote`` by the rule multiplier into an estimated index quote."""
    return Quote(
        instrument=index_ref,
        current_value=(proxy_quote.current_value * rule.multiplier).quantize(ESTIMATE_QUANTUM, ROUND_HALF_UP),
        change=(proxy_quote.change * rule.multiplier).quantize(ESTIMATE_QUANTUM, ROUND_HALF_UP),
        change_percent=proxy_quote.change_percent,
        is_estimated=True,
        label=rule.fallback_label,
        observed_at=proxy_quote.observed_at,
    )


class IndexFallbackEstimator:
    """Resolve index quotes, substituting a proxy estimate for the zero sentinel."""

    def __init__(
        self,
        resolver: PriceResolver,
        proxies: ProxyMapping | None = None,
        *,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.resolver = resolver
        self.proxies = proxies if proxies is not None else default_proxy_mapping()
        self.metrics = metrics

    async def resolve_index(self, index_ref: InstrumentRef) -> Quote:
        """Resolve ``index_ref``.

        Failures of the index call itself propagate. A degenerate (zero)
        value is replaced by a proxy estimate when a rule exists; if the
        proxy call fails the degenerate quote is returned as is.
        """
        if not index_ref.is_index:
            raise ValueError(f"{index_ref} is not an index instrument")

        quote = await self.resolver.resolve(index_ref)
        if not quote.is_degenerate:
            return quote

        rule = self.proxies.get(index_ref)
        if rule is None:
            logger.bind(instrument=str(index_ref)).info("Index value unavailable and no proxy configured")
            return quote

        logger.bind(instrument=str(index_ref)).info(
            f"Index value unavailable, estimating from {rule.proxy} x {rule.multiplier}"
        )
        try:
            proxy_quote = await self.resolver.resolve(rule.proxy)
        except QuoteError as e:
            logger.bind(instrument=str(index_ref), error_code=e.error_code.value).warning(
                f"Proxy {rule.proxy} failed, returning unestimated index quote: {e.message}"
            )
            return quote

        estimate = estimate_from_proxy(index_ref, proxy_quote, rule)
        (self.metrics or get_metrics_collector()).record_estimate(index_ref.symbol)
        return estimate


__all__ = ["ESTIMATE_QUANTUM", "IndexFallbackEstimator", "estimate_from_proxy"]
