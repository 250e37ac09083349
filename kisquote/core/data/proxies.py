"""Index-to-proxy table used to estimate unsupported index quotes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from kisquote.core.models import InstrumentClass, InstrumentRef, Market


@dataclass(frozen=True)
class ProxyRule:
    """Proxy instrument whose price times ``multiplier`` approximates the index."""

    proxy: InstrumentRef
    multiplier: Decimal
    fallback_label: str

    def __post_init__(self) -> None:
        if self.multiplier <= 0:
            raise ValueError("multiplier must be positive")


class ProxyMapping(Mapping[InstrumentRef, ProxyRule]):
    """Read-only mapping from index instrument to :class:`ProxyRule`."""

    def __init__(self, rules: Mapping[InstrumentRef, ProxyRule] | None = None) -> None:
        for ref in (rules or {}):
            if not ref.is_index:
                raise ValueError(f"{ref} is not an index instrument")
        self._rules = MappingProxyType(dict(rules or {}))

    def __getitem__(self, key: InstrumentRef) -> ProxyRule:
        return self._rules[key]

    def __iter__(self) -> Iterator[InstrumentRef]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ProxyMapping({len(self)} rules)"

    @classmethod
    def from_entries(cls, entries: Iterable[Any], *, market: Market = Market.US) -> "ProxyMapping":
        """Build a mapping from config rows exposing ``index``, ``proxy``,
        ``exchange``, ``multiplier`` and ``label`` attributes."""
        rules: dict[InstrumentRef, ProxyRule] = {}
        for entry in entries:
            try:
                multiplier = Decimal(str(entry.multiplier))
            except InvalidOperation as e:
                raise ValueError(f"invalid multiplier for {entry.index}: {entry.multiplier}") from e
            index_ref = InstrumentRef(symbol=entry.index, market=market, instrument_class=InstrumentClass.INDEX)
            rules[index_ref] = ProxyRule(
                proxy=InstrumentRef(symbol=entry.proxy, market=Market(entry.exchange)),
                multiplier=multiplier,
                fallback_label=entry.label,
            )
        return cls(rules)


_DEFAULT_RULES: tuple[tuple[str, str, Market, str, str], ...] = (
    ("SPX", "SPY", Market.AMS, "10", "S&P 500"),
    ("CCMP", "QQQ", Market.NAS, "35", "NASDAQ 100"),
    ("INDU", "DIA", Market.AMS, "90", "DOW JONES"),
    ("RUT", "IWM", Market.AMS, "10", "Russell 2000"),
)


@lru_cache(maxsize=1)
def default_proxy_mapping() -> ProxyMapping:
    """Built-in US index proxies (SPY, QQQ, DIA, IWM)."""
    return ProxyMapping(
        {
            InstrumentRef(symbol=index, market=Market.US, instrument_class=InstrumentClass.INDEX): ProxyRule(
                proxy=InstrumentRef(symbol=proxy, market=exchange),
                multiplier=Decimal(multiplier),
                fallback_label=label,
            )
            for index, proxy, exchange, multiplier, label in _DEFAULT_RULES
        }
    )


__all__ = ["ProxyMapping", "ProxyRule", "default_proxy_mapping"]
