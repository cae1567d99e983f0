"""Per-range scanning workers."""

from file_summer.worker.run import WorkerTask, compute_sum, run_worker
from file_summer.worker.scan import DigitGroupScanner, scan_stream, sum_digit_groups, sum_range

__all__ = [
    "DigitGroupScanner",
    "WorkerTask",
    "compute_sum",
    "run_worker",
    "scan_stream",
    "sum_digit_groups",
    "sum_range",
]
