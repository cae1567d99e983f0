"""Coordinator-side state and result structures."""

import logging
import threading
from dataclasses import dataclass, field
from multiprocessing.connection import Connection

from file_summer.partition.types import BlockRange
from file_summer.solver.execution import Runner

logger = logging.getLogger(__name__)


@dataclass
class CoordinatorState:
    """Running total and the number of workers not yet accounted for."""

    total_sum: int = 0
    pending_count: int = 0


@dataclass
class WorkerHandle:
    """Coordinator's view of one spawned worker."""

    worker_id: int
    block: BlockRange
    reader: Connection
    runner: Runner = None

    def close_channel(self) -> None:
        self.reader.close()

    def reap(self) -> int | None:
        """Wait for the worker to finish; returns a process exit code when there is one."""
        if self.runner is None:
            return None
        self.runner.join()
        if isinstance(self.runner, threading.Thread):
            return None

        exitcode = self.runner.exitcode
        if exitcode:
            logger.warning("Worker %d exited with status %d", self.worker_id, exitcode)
        return exitcode


@dataclass(frozen=True)
class SumResult:
    """Outcome of a run."""

    total_sum: int
    worker_sums: dict[int, int] = field(default_factory=dict)
    failed_workers: tuple[int, ...] = ()
    length: int | None = None

    @property
    def worker_count(self) -> int:
        return len(self.worker_sums) + len(self.failed_workers)
