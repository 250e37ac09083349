"""Partition per-instrument outcomes into a batch result."""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from kisquote.core.models import (
    BatchResult,
    ErrorKind,
    Failure,
    InstrumentRef,
    Outcome,
    Quote,
    Success,
)

MISSING_OUTCOME_MESSAGE = "no outcome recorded"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResultAggregator:
    """Split outcomes into succeeded quotes and failed instruments.

    Pure apart from the timestamp, which comes from ``clock``. Both lists
    follow the order of ``instruments``; an instrument with no outcome is
    reported as failed.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    def aggregate(self, outcomes: Iterable[Outcome], instruments: Sequence[InstrumentRef]) -> BatchResult:
        pending: dict[InstrumentRef, deque[Outcome]] = defaultdict(deque)
        for outcome in outcomes:
            pending[outcome.instrument].append(outcome)

        succeeded: list[Quote] = []
        failed: list[InstrumentRef] = []
        failures: list[Failure] = []
        for instrument in instruments:
            queue = pending.get(instrument)
            outcome = queue.popleft() if queue else None
            if isinstance(outcome, Success):
                succeeded.append(outcome.quote)
                continue
            if outcome is None:
                outcome = Failure(instrument=instrument, error_kind=ErrorKind.UNKNOWN, message=MISSING_OUTCOME_MESSAGE)
            failed.append(instrument)
            failures.append(outcome)

        return BatchResult(
            succeeded=tuple(succeeded),
            failed=tuple(failed),
            observed_at=self._clock(),
            failures=tuple(failures),
        )


__all__ = ["ResultAggregator"]
