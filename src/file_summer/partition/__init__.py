"""Partitioning of the input into per-worker byte ranges."""

from file_summer.partition.partition import compute_ranges, plan_partition, probe_length
from file_summer.partition.types import BUFFER_SIZE, MAX_WORKERS, BlockRange, PartitionPlan

__all__ = [
    "BUFFER_SIZE",
    "MAX_WORKERS",
    "BlockRange",
    "PartitionPlan",
    "compute_ranges",
    "plan_partition",
    "probe_length",
]
