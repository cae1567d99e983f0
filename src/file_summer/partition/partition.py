"""Byte-range partitioning of the input source."""

import logging
import os
import stat

from file_summer.config import SumConfig
from file_summer.errors import ConfigurationError, SetupFailure
from file_summer.partition.types import MAX_WORKERS, BlockRange, PartitionPlan

logger = logging.getLogger(__name__)


def compute_ranges(
    length: int,
    worker_count: int | None = None,
    block_size: int = 0,
) -> list[BlockRange]:
    """
    Split `[0, length)` into contiguous ranges, one per worker.

    With a block size the worker count is `length // block_size`; otherwise
    the block size is `length // worker_count`. The last range is always
    open-ended so it absorbs the remainder of the truncating division.
    """
    if worker_count is not None and block_size:
        raise ConfigurationError("worker count and block size are mutually exclusive")
    if block_size < 0:
        raise ConfigurationError(f"block size must be >= 0, got {block_size}")

    if block_size > 0:
        count = length // block_size
        size = block_size
    else:
        count = 1 if worker_count is None else worker_count
        if count < 1:
            raise ConfigurationError(f"worker count must be >= 1, got {count}")
        size = length // count

    if count == 0:
        raise ConfigurationError(
            f"block size {block_size} leaves no work for any worker (input is {length} bytes)"
        )
    if count > MAX_WORKERS:
        raise ConfigurationError(f"at most {MAX_WORKERS} workers are supported, got {count}")

    if size == 0 and count > 1:
        logger.debug("Input of %d bytes is smaller than %d workers; leading ranges are empty", length, count)

    ranges = [BlockRange(i * size, (i + 1) * size - 1) for i in range(count - 1)]
    ranges.append(BlockRange((count - 1) * size, None))
    return ranges


def probe_length(path: str) -> int | None:
    """
    Return the byte length of the file at `path`.

    Returns None for sources that cannot be seeked (pipes, FIFOs, character
    devices), which are then processed by a single worker.
    """
    try:
        info = os.stat(path)
    except OSError as exc:
        raise SetupFailure(f"Error checking input file {path}: {exc.strerror}") from exc

    if not stat.S_ISREG(info.st_mode):
        return None
    return info.st_size


def plan_partition(config: SumConfig, length: int | None) -> PartitionPlan:
    """
    Build the partition plan for a run.

    A non-seekable source (`length is None`) is always handled by one worker
    over a single open range; requested sizing is ignored with a warning.
    """
    if length is not None:
        ranges = compute_ranges(length, config.worker_count, config.block_size)
        return PartitionPlan(ranges=ranges, length=length)

    warnings = []
    source = "stdin" if config.is_stdin else config.input_path
    if config.block_size:
        warnings.append(f"using {source}... ignoring block size {config.block_size}.")
    if config.worker_count is not None and config.worker_count > 1:
        warnings.append(f"using {source}... ignoring child count {config.worker_count}.")
    return PartitionPlan(ranges=[BlockRange(0, None)], length=None, warnings=warnings)
