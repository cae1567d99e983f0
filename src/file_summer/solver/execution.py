"""Execution policy and worker spawning utilities."""

import logging
import multiprocessing
import os
import sys
import threading
from collections.abc import Callable
from multiprocessing.connection import Connection
from multiprocessing.process import BaseProcess
from typing import TypeAlias

from file_summer.worker.run import WorkerTask

logger = logging.getLogger(__name__)

WorkerFn: TypeAlias = Callable[[WorkerTask, Connection], None]
Runner: TypeAlias = BaseProcess | threading.Thread | None

# Environment variable to override execution mode selection.
SUMS_EXECUTOR_ENV = "SUMS_EXECUTOR"

PROCESSES = "processes"
THREADS = "threads"
SERIAL = "serial"
EXECUTION_MODES = (PROCESSES, THREADS, SERIAL)


def is_gil_enabled() -> bool:
    """Check if GIL is enabled."""
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def get_execution_mode() -> str:
    """
    Select how worker execution contexts are created.

    Priority:
    1. SUMS_EXECUTOR env var override ("processes", "threads", or "serial")
    2. Auto-select based on GIL status (disabled -> threads, enabled -> processes)

    "serial" mode runs each worker in the main thread as it is spawned - useful
    for debugging with breakpoints.
    """
    executor_override = os.environ.get(SUMS_EXECUTOR_ENV, "").lower()

    if executor_override in EXECUTION_MODES:
        return executor_override
    if executor_override:
        logger.warning("Ignoring unknown %s=%s", SUMS_EXECUTOR_ENV, executor_override)

    if is_gil_enabled():
        return PROCESSES
    return THREADS


def spawn_worker(mode: str, worker_fn: WorkerFn, task: WorkerTask, writer: Connection) -> Runner:
    """
    Start one worker bound to `writer` and return its execution handle.

    The coordinator keeps no reference to the write end once the worker owns
    it, so a worker that dies without writing is seen as a closed channel.
    """
    name = f"summer-worker-{task.worker_id}"

    if mode == SERIAL:
        try:
            worker_fn(task, writer)
        except Exception:
            logger.exception("Worker %d raised", task.worker_id)
        return None

    if mode == THREADS:
        thread = threading.Thread(target=worker_fn, args=(task, writer), name=name, daemon=True)
        thread.start()
        return thread

    process = multiprocessing.Process(target=worker_fn, args=(task, writer), name=name)
    try:
        process.start()
    finally:
        writer.close()
    return process
