"""Shared constants and range structures for partitioning."""

from dataclasses import dataclass, field

# 1MB buffer for efficient I/O.
BUFFER_SIZE = 1024 * 1024

# Worker ids travel as unsigned 16-bit integers.
MAX_WORKERS = 0xFFFF


@dataclass(frozen=True, slots=True)
class BlockRange:
    """
    Contiguous span of byte offsets assigned to one worker.

    `end` is the inclusive last offset; None means the range runs to the
    end of the stream.
    """

    start: int
    end: int | None = None

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def span(self) -> int | None:
        """Number of bytes in the range, or None when open-ended."""
        if self.end is None:
            return None
        return max(0, self.end - self.start + 1)


@dataclass
class PartitionPlan:
    """Ranges to spawn plus any non-fatal warnings raised while planning."""

    ranges: list[BlockRange]
    length: int | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def worker_count(self) -> int:
        return len(self.ranges)
