"""Run configuration shared by the coordinator and its workers."""

from dataclasses import dataclass

from file_summer.errors import ConfigurationError

# "-" selects the standard streams for input and output.
STDIO_PATH = "-"


@dataclass(frozen=True, slots=True)
class SumConfig:
    """Immutable options for one summing run."""

    input_path: str = STDIO_PATH
    output_path: str = STDIO_PATH
    worker_count: int | None = None
    block_size: int = 0

    @property
    def is_stdin(self) -> bool:
        return self.input_path == STDIO_PATH

    def validate(self) -> None:
        """Raise ConfigurationError for inconsistent sizing options."""
        if self.worker_count is not None and self.block_size:
            raise ConfigurationError("worker count and block size are mutually exclusive")
        if self.worker_count is not None and self.worker_count < 1:
            raise ConfigurationError(f"worker count must be >= 1, got {self.worker_count}")
        if self.block_size < 0:
            raise ConfigurationError(f"block size must be >= 0, got {self.block_size}")
