"""Readiness multiplexing over outstanding result channels."""

from multiprocessing.connection import Connection, wait

from file_summer.solver.types import WorkerHandle


class ReadinessMultiplexer:
    """
    Block until at least one registered channel is readable.

    A channel counts as readable when it holds data or has been closed by
    its writer, so a dead worker wakes the coordinator as well.
    """

    def __init__(self) -> None:
        self._watched: dict[Connection, WorkerHandle] = {}

    def __len__(self) -> int:
        return len(self._watched)

    def __contains__(self, handle: WorkerHandle) -> bool:
        return handle.reader in self._watched

    def register(self, handle: WorkerHandle) -> None:
        if handle.reader in self._watched:
            raise ValueError(f"worker {handle.worker_id} is already registered")
        self._watched[handle.reader] = handle

    def unregister(self, handle: WorkerHandle) -> None:
        self._watched.pop(handle.reader, None)

    def wait(self) -> list[WorkerHandle]:
        """Return the handles whose channels are ready. No timeout."""
        if not self._watched:
            raise RuntimeError("no channels registered")
        ready = wait(list(self._watched))
        return [self._watched[conn] for conn in ready]
