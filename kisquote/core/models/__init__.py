"""Domain models for quotes and batches."""

from kisquote.core.models.base import InstrumentRef, Quote
from kisquote.core.models.batch import (
    BatchRequest,
    BatchResult,
    ErrorKind,
    Failure,
    Outcome,
    Success,
)
from kisquote.core.models.market import EtfCategory, InstrumentClass, Market, StockSector

__all__ = [
    "InstrumentRef",
    "Quote",
    "BatchRequest",
    "BatchResult",
    "ErrorKind",
    "Failure",
    "Outcome",
    "Success",
    "EtfCategory",
    "InstrumentClass",
    "Market",
    "StockSector",
]
