"""kisquote - resilient batch market-data retrieval over the KIS Open API.

Fetches current quotes for ETFs, stocks and indices in rate-limited chunks,
isolates per-instrument failures and estimates unsupported index values
from correlated proxy ETFs.
"""

from kisquote.core.config import AppConfig, ConfigManager
from kisquote.core.data.providers import KISQuoteClient
from kisquote.core.models import BatchResult, InstrumentClass, InstrumentRef, Market, Quote
from kisquote.core.services import QuoteService

__version__ = "0.1.0"


def create_service(config: AppConfig | None = None) -> QuoteService:
    """Build a :class:`QuoteService` backed by the KIS client.

    Without ``config`` the TOML file and environment overrides are loaded.
    """
    config = config or ConfigManager().get_config()
    return QuoteService(KISQuoteClient(config.kis), config)


__all__ = [
    "AppConfig",
    "BatchResult",
    "InstrumentClass",
    "InstrumentRef",
    "KISQuoteClient",
    "Market",
    "Quote",
    "QuoteService",
    "create_service",
]
