"""Upstream quote clients."""

from kisquote.core.data.providers.base import QuoteClient, RawQuote
from kisquote.core.data.providers.kis import KISQuoteClient
from kisquote.core.data.providers.token import TokenManager

__all__ = ["KISQuoteClient", "QuoteClient", "RawQuote", "TokenManager"]
