"""Batch request, per-instrument outcome and batch result types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from .base import InstrumentRef, Quote


class ErrorKind(str, Enum):
    """Failure taxonomy shared by outcomes and exceptions."""

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    UPSTREAM = "upstream"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BatchRequest:
    """Instruments to fetch plus the chunking parameters."""

    instruments: tuple[InstrumentRef, ...]
    chunk_size: int = 10
    inter_chunk_delay: float = 0.1

    def __post_init__(self) -> None:
        object.__setattr__(self, "instruments", tuple(self.instruments))
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.inter_chunk_delay < 0:
            raise ValueError("inter_chunk_delay must be non-negative")

    def chunks(self) -> list[tuple[InstrumentRef, ...]]:
        """Split instruments into consecutive chunks, preserving order."""
        return [
            self.instruments[start : start + self.chunk_size]
            for start in range(0, len(self.instruments), self.chunk_size)
        ]


@dataclass(frozen=True)
class Success:
    instrument: InstrumentRef
    quote: Quote


@dataclass(frozen=True)
class Failure:
    instrument: InstrumentRef
    error_kind: ErrorKind
    message: str = ""


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class BatchResult:
    """Partitioned outcome of one batch call."""

    succeeded: tuple[Quote, ...]
    failed: tuple[InstrumentRef, ...]
    observed_at: datetime
    failures: tuple[Failure, ...] = ()

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def to_payload(self) -> dict[str, object]:
        """JSON-ready ``{data, failed, timestamp}`` body."""
        return {
            "data": [quote.model_dump(mode="json") for quote in self.succeeded],
            "failed": [instrument.model_dump(mode="json") for instrument in self.failed],
            "timestamp": self.observed_at.isoformat(),
        }
