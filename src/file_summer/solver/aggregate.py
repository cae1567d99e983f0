"""Accumulation of worker outcomes into the final sum."""

import logging
from collections.abc import Callable
from typing import TypeAlias

from file_summer.channel.protocol import ReadOutcome
from file_summer.solver.types import CoordinatorState, SumResult

logger = logging.getLogger(__name__)

Reporter: TypeAlias = Callable[[int, int], None]


class Aggregator:
    """
    Consume one outcome per worker.

    Successful records add to the total; failed reads add nothing but are
    recorded so callers can tell a crashed worker from a zero sum.
    """

    def __init__(self, worker_count: int, report: Reporter | None = None):
        self.state = CoordinatorState(total_sum=0, pending_count=worker_count)
        self._report = report
        self._worker_sums: dict[int, int] = {}
        self._failed: list[int] = []

    @property
    def done(self) -> bool:
        return self.state.pending_count == 0

    def accept(self, outcome: ReadOutcome) -> None:
        if self.done:
            raise RuntimeError("all workers are already accounted for")
        if outcome.worker_id in self._worker_sums or outcome.worker_id in self._failed:
            raise ValueError(f"worker {outcome.worker_id} was already accounted for")

        self.state.pending_count -= 1

        if outcome.record is None:
            self._failed.append(outcome.worker_id)
            logger.warning("Worker %d contributed nothing: %s", outcome.worker_id, outcome.error.reason)
            return

        self.state.total_sum += outcome.record.sum
        self._worker_sums[outcome.worker_id] = outcome.record.sum
        if self._report is not None:
            self._report(outcome.worker_id, outcome.record.sum)

    def summary(self, length: int | None = None) -> SumResult:
        return SumResult(
            total_sum=self.state.total_sum,
            worker_sums=dict(self._worker_sums),
            failed_workers=tuple(self._failed),
            length=length,
        )
