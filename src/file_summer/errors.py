"""Exception hierarchy for the summer pipeline."""


class SummerError(Exception):
    """Base class for all file-summer errors."""


class ConfigurationError(SummerError):
    """Conflicting or unusable sizing options; raised before any worker spawns."""


class SetupFailure(SummerError):
    """A channel, length probe or worker could not be created."""


class WorkerIOFailure(SummerError):
    """A worker's channel closed without delivering a complete record."""

    def __init__(self, worker_id: int, reason: str):
        super().__init__(f"worker {worker_id}: {reason}")
        self.worker_id = worker_id
        self.reason = reason
