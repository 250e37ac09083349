"""Prometheus metrics for batch quote retrieval."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

_OUTCOME_LABELS = frozenset({"success", "configuration", "authentication", "upstream", "unknown"})


@dataclass
class _MarketStats:
    """Running totals per market, used for the failure-rate gauge."""

    total: int = 0
    failures: int = 0


class MetricsCollector:
    """Collects and exposes Prometheus metrics for quote resolution."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.quote_latency_seconds = Histogram(
            "kisquote_quote_latency_seconds",
            "Latency distribution of single-instrument quote resolutions.",
            buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
            registry=self.registry,
        )
        self.quote_outcomes_total = Counter(
            "kisquote_quote_outcomes_total",
            "Per-instrument outcomes grouped by market and result kind.",
            ("market", "outcome"),
            registry=self.registry,
        )
        self.index_estimates_total = Counter(
            "kisquote_index_estimates_total",
            "Index quotes replaced by a proxy-based estimate.",
            ("index",),
            registry=self.registry,
        )
        self.batch_chunks_total = Counter(
            "kisquote_batch_chunks_total",
            "Chunks dispatched by the rate-limited batch fetcher.",
            registry=self.registry,
        )
        self.failure_rate = Gauge(
            "kisquote_failure_rate",
            "Share of failed quote resolutions per market (0-1 range).",
            ("market",),
            registry=self.registry,
        )
        self._market_stats: DefaultDict[str, _MarketStats] = defaultdict(_MarketStats)

    def observe_outcome(self, market: str, outcome: str, latency_seconds: float | None = None) -> None:
        """Record one per-instrument outcome; ``outcome`` is ``success`` or an error kind."""

        label = outcome if outcome in _OUTCOME_LABELS else "unknown"
        if latency_seconds is not None:
            self.quote_latency_seconds.observe(latency_seconds)
        self.quote_outcomes_total.labels(market=market, outcome=label).inc()

        stats = self._market_stats[market]
        stats.total += 1
        if label != "success":
            stats.failures += 1
        self.failure_rate.labels(market=market).set(stats.failures / stats.total)

    def record_estimate(self, index: str) -> None:
        self.index_estimates_total.labels(index=index).inc()

    def record_chunk(self) -> None:
        self.batch_chunks_total.inc()

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the global metrics collector instance."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Override the global metrics collector for application wiring or tests."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector
