"""Tests for the worker entry point."""

import io
import sys

import pytest

from file_summer.channel import ResultRecord, open_channel, read_record
from file_summer.partition import BlockRange
from file_summer.worker import WorkerTask, compute_sum, run_worker


def test_run_worker_writes_one_record_and_closes(tmp_path) -> None:
    path = tmp_path / "input.txt"
    path.write_bytes(b"abc123def456")
    reader, writer = open_channel()

    run_worker(WorkerTask(worker_id=3, block=BlockRange(0, None), source=str(path)), writer)

    outcome = read_record(reader, 3)
    assert outcome.record == ResultRecord(3, 579)
    # Write end is closed: the next read sees end of stream.
    with pytest.raises(EOFError):
        reader.recv_bytes()


def test_run_worker_closes_channel_when_scan_fails(tmp_path) -> None:
    reader, writer = open_channel()
    task = WorkerTask(worker_id=0, block=BlockRange(0, None), source=str(tmp_path / "gone.txt"))

    with pytest.raises(FileNotFoundError):
        run_worker(task, writer)

    outcome = read_record(reader, 0)
    assert not outcome.ok
    assert outcome.error.worker_id == 0


def test_compute_sum_reads_stdin(monkeypatch) -> None:
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"12 3")))
    assert compute_sum(WorkerTask(worker_id=0, block=BlockRange(0, None))) == 123
