import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from file_summer.channel import open_channel, read_record
from file_summer.config import STDIO_PATH, SumConfig
from file_summer.errors import SetupFailure, SummerError
from file_summer.partition import BlockRange, plan_partition, probe_length
from file_summer.solver.aggregate import Aggregator
from file_summer.solver.execution import (
    PROCESSES,
    SUMS_EXECUTOR_ENV,
    THREADS,
    WorkerFn,
    get_execution_mode,
    is_gil_enabled,
    spawn_worker,
)
from file_summer.solver.multiplex import ReadinessMultiplexer
from file_summer.solver.types import SumResult, WorkerHandle
from file_summer.worker import WorkerTask, run_worker

logger = logging.getLogger(__name__)


def solve(
    config: SumConfig,
    out: TextIO | None = None,
    worker_fn: WorkerFn = run_worker,
) -> SumResult:
    """
    Sum the three-digit groups of the configured input.

    1. Probe the input length and split it into one range per worker
    2. Spawn every worker on its own result channel
    3. Drain whichever channels become ready until all workers are accounted for

    When `out` is given the report lines are written to it as results arrive.
    """
    total_start = time.perf_counter()
    config.validate()

    length = None if config.is_stdin else probe_length(config.input_path)
    plan = plan_partition(config, length)
    for warning in plan.warnings:
        logger.warning("%s", warning)

    mode = get_execution_mode()
    if config.is_stdin and mode == PROCESSES:
        # Child processes do not inherit our standard input.
        mode = THREADS

    gil_status = "enabled" if is_gil_enabled() else "disabled"
    size_desc = "stream" if length is None else f"{length} bytes"
    logger.info(
        "Starting: input=%s (%s), workers=%d, executor=%s, GIL=%s",
        config.input_path,
        size_desc,
        plan.worker_count,
        mode,
        gil_status,
    )
    logger.debug("Executor can be overridden with %s", SUMS_EXECUTOR_ENV)

    if out is not None and length is not None:
        out.write(f"File size: {length}\n")
        out.flush()

    source = None if config.is_stdin else config.input_path
    multiplexer = ReadinessMultiplexer()
    handles = _spawn_all(plan.ranges, source, mode, worker_fn, multiplexer)

    report = None if out is None else _line_reporter(out)
    aggregator = Aggregator(plan.worker_count, report=report)

    try:
        while not aggregator.done:
            for handle in multiplexer.wait():
                outcome = read_record(handle.reader, handle.worker_id)
                multiplexer.unregister(handle)
                handle.close_channel()
                aggregator.accept(outcome)
    finally:
        _release_pending(handles, multiplexer)

    for handle in handles:
        handle.reap()

    result = aggregator.summary(length)
    if out is not None:
        out.write(f"Final Sum: {result.total_sum}\n")
        out.flush()

    total_time = time.perf_counter() - total_start
    if result.failed_workers:
        logger.warning(
            "%d of %d workers failed: %s",
            len(result.failed_workers),
            plan.worker_count,
            ", ".join(str(worker_id) for worker_id in result.failed_workers),
        )
    logger.info("Result: sum %d (total %.2fs)", result.total_sum, total_time)
    return result


def _spawn_all(
    ranges: list[BlockRange],
    source: str | None,
    mode: str,
    worker_fn: WorkerFn,
    multiplexer: ReadinessMultiplexer,
) -> list[WorkerHandle]:
    """Create a channel and a worker per range; on failure close every channel opened so far."""
    handles: list[WorkerHandle] = []
    try:
        for worker_id, block in enumerate(ranges):
            reader, writer = open_channel()
            handle = WorkerHandle(worker_id, block, reader)
            handles.append(handle)
            multiplexer.register(handle)

            task = WorkerTask(worker_id=worker_id, block=block, source=source)
            try:
                handle.runner = spawn_worker(mode, worker_fn, task, writer)
            except (OSError, RuntimeError) as exc:
                writer.close()
                raise SetupFailure(f"Error spawning worker {worker_id}: {exc}") from exc
    except SetupFailure:
        _release_pending(handles, multiplexer)
        raise

    return handles


def _release_pending(handles: list[WorkerHandle], multiplexer: ReadinessMultiplexer) -> None:
    """Close the channels of workers that were never accounted for."""
    for handle in handles:
        if handle in multiplexer:
            multiplexer.unregister(handle)
            handle.close_channel()


def _line_reporter(out: TextIO):
    def report(worker_id: int, total: int) -> None:
        out.write(f"Worker {worker_id} Sum: {total}\n")

    return report


@contextmanager
def open_output(path: str) -> Iterator[TextIO]:
    """Yield the output sink; "-" is standard output and is left open."""
    if path == STDIO_PATH:
        yield sys.stdout
        return
    try:
        handle = open(path, "w", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        raise SetupFailure(f"Error opening output file {path}: {exc.strerror}") from exc
    with handle:
        yield handle


def main_solve(config: SumConfig) -> int:
    """Main entry point that writes the report and returns a process exit status."""
    try:
        with open_output(config.output_path) as out:
            solve(config, out)
    except SummerError as exc:
        logger.error("%s", exc)
        return 1
    return 0
