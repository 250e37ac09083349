"""Tests for the Prometheus metrics collector."""

from prometheus_client import CollectorRegistry

from kisquote.core.monitoring import MetricsCollector, configure_metrics_collector, get_metrics_collector


def test_observe_outcome_updates_counters_and_failure_rate() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.observe_outcome("KRX", "success", 0.25)
    collector.observe_outcome("KRX", "authentication", 0.40)

    assert registry.get_sample_value("kisquote_quote_latency_seconds_count") == 2.0
    assert registry.get_sample_value("kisquote_quote_latency_seconds_sum") == 0.65
    assert registry.get_sample_value("kisquote_quote_outcomes_total", {"market": "KRX", "outcome": "success"}) == 1.0
    assert (
        registry.get_sample_value("kisquote_quote_outcomes_total", {"market": "KRX", "outcome": "authentication"})
        == 1.0
    )
    assert registry.get_sample_value("kisquote_failure_rate", {"market": "KRX"}) == 0.5


def test_unexpected_outcome_labels_collapse_to_unknown() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.observe_outcome("NAS", "socket-reset")

    assert registry.get_sample_value("kisquote_quote_outcomes_total", {"market": "NAS", "outcome": "unknown"}) == 1.0
    assert registry.get_sample_value("kisquote_quote_latency_seconds_count") == 0.0


def test_estimates_and_chunks_are_counted() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.record_estimate("INDU")
    collector.record_estimate("INDU")
    collector.record_chunk()

    assert registry.get_sample_value("kisquote_index_estimates_total", {"index": "INDU"}) == 2.0
    assert registry.get_sample_value("kisquote_batch_chunks_total") == 1.0
    assert b"kisquote_index_estimates_total" in collector.render()


def test_global_collector_can_be_overridden() -> None:
    replacement = MetricsCollector(registry=CollectorRegistry())
    configure_metrics_collector(replacement)
    try:
        assert get_metrics_collector() is replacement
    finally:
        configure_metrics_collector(None)
    assert get_metrics_collector() is not replacement
