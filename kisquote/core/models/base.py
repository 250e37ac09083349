"""Base data models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .market import InstrumentClass, Market


class InstrumentRef(BaseModel):
    """Identity of a quoted instrument.

    Frozen so it can key dictionaries (proxy table, outcome lookups).
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    market: Market
    instrument_class: InstrumentClass = InstrumentClass.EQUITY

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        symbol = value.strip().upper()
        if not symbol:
            raise ValueError("symbol cannot be empty")
        return symbol

    @property
    def is_index(self) -> bool:
        return self.instrument_class is InstrumentClass.INDEX

    def __str__(self) -> str:
        return f"{self.market.value}:{self.symbol}"


class Quote(BaseModel):
    """Current quote for one instrument."""

    model_config = ConfigDict(frozen=True)

    instrument: InstrumentRef
    current_value: Decimal
    change: Decimal = Decimal("0")
    change_percent: Decimal = Decimal("0")
    is_estimated: bool = False
    label: str
    observed_at: datetime

    @property
    def is_degenerate(self) -> bool:
        """Non-positive value; for an index this is the upstream "unsupported" sentinel."""
        return self.current_value <= 0

    @field_serializer("current_value", "change", "change_percent", when_used="json")
    def serialize_decimal(self, value: Decimal) -> str:
        """Serialize Decimal to string."""
        return str(value)

    @field_serializer("observed_at", when_used="json")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to isoformat string."""
        return value.isoformat()
