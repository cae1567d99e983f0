"""Worker entry point: scan one range and report it over the channel."""

import logging
import sys
from dataclasses import dataclass
from multiprocessing.connection import Connection

from file_summer.channel.protocol import ResultRecord, send_record
from file_summer.partition.types import BlockRange
from file_summer.worker.scan import scan_stream, sum_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkerTask:
    """Everything one worker needs; handed over at spawn time."""

    worker_id: int
    block: BlockRange
    # None reads standard input.
    source: str | None = None


def compute_sum(task: WorkerTask) -> int:
    if task.source is None:
        return scan_stream(sys.stdin.buffer)
    return sum_range(task.source, task.block)


def run_worker(task: WorkerTask, writer: Connection) -> None:
    """
    Run the scan to completion and emit exactly one record.

    If the scan raises, the write end is closed with nothing written so the
    coordinator observes the failure as a closed channel.
    """
    try:
        total = compute_sum(task)
    except Exception:
        writer.close()
        raise

    logger.debug("Worker %d scanned %s: sum=%d", task.worker_id, task.block, total)
    send_record(writer, ResultRecord(task.worker_id, total))
