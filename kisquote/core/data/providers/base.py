"""
Quote client boundary.

The batch layer only talks to upstream through :class:`QuoteClient`. Concrete
clients translate an :class:`InstrumentRef` into an upstream request and hand
back a :class:`RawQuote`; they raise on any failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from kisquote.core.models import InstrumentRef


@dataclass(frozen=True)
class RawQuote:
    """Upstream answer before it is turned into a :class:`Quote`."""

    current_value: Decimal
    change: Decimal
    change_percent: Decimal
    observed_at: datetime
    label: str | None = None


class QuoteClient(ABC):
    """Abstract base class for upstream quote clients."""

    @abstractmethod
    async def get_quote(self, instrument: InstrumentRef) -> RawQuote:
        """
        Fetch the current quote for ``instrument``.

        Raises:
            ConfigurationError: credentials are missing
            AuthenticationError: the access token was rejected or could not be issued
            UpstreamError: the provider answered with a business error
        """
        pass

    async def ensure_ready(self) -> None:
        """Validate batch-wide preconditions (credentials, access token)."""
        return None

    async def aclose(self) -> None:
        """Release transport resources."""
        return None


__all__ = ["QuoteClient", "RawQuote"]
