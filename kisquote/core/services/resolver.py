"""Single-instrument quote resolution."""

from __future__ import annotations

import asyncio

from kisquote.core.data.providers.base import QuoteClient
from kisquote.core.exceptions import QuoteError, translate_exception
from kisquote.core.models import InstrumentRef, Quote

DEFAULT_CALL_TIMEOUT = 10.0


class PriceResolver:
    """Fetch one quote from the upstream client and normalise it.

    One upstream call per instrument, bounded by ``call_timeout`` seconds and
    never retried. Every failure is re-raised as a :class:`QuoteError`
    subclass so callers can branch on ``error.kind``.
    """

    def __init__(self, client: QuoteClient, *, call_timeout: float = DEFAULT_CALL_TIMEOUT) -> None:
        if call_timeout <= 0:
            raise ValueError("call_timeout must be positive")
        self.client = client
        self.call_timeout = call_timeout

    async def resolve(self, instrument: InstrumentRef) -> Quote:
        try:
            raw = await asyncio.wait_for(self.client.get_quote(instrument), timeout=self.call_timeout)
        except QuoteError:
            raise
        except Exception as e:
            raise translate_exception(e, symbol=str(instrument)) from e

        return Quote(
            instrument=instrument,
            current_value=raw.current_value,
            change=raw.change,
            change_percent=raw.change_percent,
            is_estimated=False,
            label=raw.label or instrument.symbol,
            observed_at=raw.observed_at,
        )


__all__ = ["DEFAULT_CALL_TIMEOUT", "PriceResolver"]
