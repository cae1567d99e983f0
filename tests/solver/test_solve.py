"""End-to-end tests for the coordinator."""

import importlib
import io
import os
import sys

import pytest

from file_summer.channel import open_channel
from file_summer.config import SumConfig
from file_summer.errors import ConfigurationError, SetupFailure
from file_summer.solver import execution, main_solve, solve
from file_summer.solver.solve import open_output
from file_summer.worker import WorkerTask, run_worker

solve_module = importlib.import_module("file_summer.solver.solve")


def exit_second_worker(task: WorkerTask, writer) -> None:
    """Worker that dies without writing anything when it is worker 1."""
    if task.worker_id == 1:
        os._exit(3)
    run_worker(task, writer)


@pytest.fixture
def threads(monkeypatch) -> None:
    monkeypatch.setenv(execution.SUMS_EXECUTOR_ENV, "threads")


@pytest.fixture
def write_input(tmp_path):
    def write(data: bytes) -> str:
        path = tmp_path / "input.dat"
        path.write_bytes(data)
        return str(path)

    return write


def report_lines(out: io.StringIO) -> list[str]:
    return out.getvalue().splitlines()


@pytest.mark.usefixtures("threads")
class TestSolve:
    """Test cases for solve with thread workers."""

    def test_single_worker_whole_range(self, write_input) -> None:
        out = io.StringIO()
        result = solve(SumConfig(input_path=write_input(b"abc123def456")), out)

        assert result.total_sum == 579
        assert report_lines(out) == ["File size: 12", "Worker 0 Sum: 579", "Final Sum: 579"]

    def test_separators_do_not_split_groups(self, write_input) -> None:
        result = solve(SumConfig(input_path=write_input(b"12 3")))
        assert result.total_sum == 123

    def test_two_workers_even_split(self, write_input) -> None:
        out = io.StringIO()
        result = solve(SumConfig(input_path=write_input(b"000111222333"), worker_count=2), out)

        assert result.worker_sums == {0: 111, 1: 555}
        assert result.total_sum == 666
        lines = report_lines(out)
        assert lines[0] == "File size: 12"
        assert sorted(lines[1:3]) == ["Worker 0 Sum: 111", "Worker 1 Sum: 555"]
        assert lines[3] == "Final Sum: 666"

    def test_multi_worker_matches_single_pass_without_straddling(self, write_input) -> None:
        path = write_input(b"100\n200\n300\n400\n")
        single = solve(SumConfig(input_path=path, worker_count=1))
        multi = solve(SumConfig(input_path=path, worker_count=4))
        assert single.total_sum == multi.total_sum == 1000

    def test_straddling_group_is_lost(self, write_input) -> None:
        # Each worker only sees two of the four digits, so neither completes a group.
        path = write_input(b"1234")
        single = solve(SumConfig(input_path=path, worker_count=1))
        split = solve(SumConfig(input_path=path, worker_count=2))

        assert single.total_sum == 123
        assert split.total_sum == 0
        assert split.worker_sums == {0: 0, 1: 0}

    def test_block_size_partitioning(self, write_input) -> None:
        result = solve(SumConfig(input_path=write_input(b"111222333444"), block_size=3))
        assert result.worker_sums == {0: 111, 1: 222, 2: 333, 3: 444}
        assert result.total_sum == 1110

    def test_empty_input(self, write_input) -> None:
        out = io.StringIO()
        result = solve(SumConfig(input_path=write_input(b""), worker_count=1), out)

        assert result.total_sum == 0
        assert result.length == 0
        assert report_lines(out) == ["File size: 0", "Worker 0 Sum: 0", "Final Sum: 0"]

    def test_more_workers_than_bytes(self, write_input) -> None:
        result = solve(SumConfig(input_path=write_input(b"123"), worker_count=5))
        assert result.worker_count == 5
        assert result.total_sum == 123

    def test_crashed_worker_still_terminates(self, write_input) -> None:
        def crash_second(task: WorkerTask, writer) -> None:
            if task.worker_id == 1:
                writer.close()
                return
            run_worker(task, writer)

        out = io.StringIO()
        result = solve(
            SumConfig(input_path=write_input(b"000111222333"), worker_count=2),
            out,
            worker_fn=crash_second,
        )

        assert result.total_sum == 111
        assert result.failed_workers == (1,)
        assert report_lines(out) == ["File size: 12", "Worker 0 Sum: 111", "Final Sum: 111"]

    def test_stdin_single_worker_with_warning(self, monkeypatch, caplog) -> None:
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"abc123def456")))
        out = io.StringIO()

        result = solve(SumConfig(worker_count=3), out)

        assert result.total_sum == 579
        assert result.length is None
        assert report_lines(out) == ["Worker 0 Sum: 579", "Final Sum: 579"]
        assert "ignoring child count 3" in caplog.text

    def test_zero_computed_workers_fails_before_output(self, write_input) -> None:
        out = io.StringIO()
        with pytest.raises(ConfigurationError):
            solve(SumConfig(input_path=write_input(b"12"), block_size=10), out)
        assert out.getvalue() == ""

    def test_conflicting_config_rejected_before_probing(self, tmp_path) -> None:
        config = SumConfig(input_path=str(tmp_path / "missing"), worker_count=2, block_size=4)
        with pytest.raises(ConfigurationError):
            solve(config, io.StringIO())

    def test_missing_input_fails_before_output(self, tmp_path) -> None:
        out = io.StringIO()
        with pytest.raises(SetupFailure):
            solve(SumConfig(input_path=str(tmp_path / "missing")), out)
        assert out.getvalue() == ""

    def test_spawn_failure_closes_channels(self, write_input, monkeypatch) -> None:
        readers = []

        def tracking_channel():
            reader, writer = open_channel()
            readers.append(reader)
            return reader, writer

        def failing_spawn(mode, worker_fn, task, writer):
            if task.worker_id == 1:
                raise OSError("fork failed")
            writer.close()
            return None

        monkeypatch.setattr(solve_module, "open_channel", tracking_channel)
        monkeypatch.setattr(solve_module, "spawn_worker", failing_spawn)

        with pytest.raises(SetupFailure, match="worker 1"):
            solve(SumConfig(input_path=write_input(b"000111222333"), worker_count=3))
        assert len(readers) == 2
        assert all(reader.closed for reader in readers)


    def test_interrupted_drain_closes_remaining_channels(self, write_input, monkeypatch) -> None:
        readers = []

        class Interrupted(Exception):
            pass

        def tracking_channel():
            reader, writer = open_channel()
            readers.append(reader)
            return reader, writer

        def interrupted_read(reader, worker_id):
            raise Interrupted

        def silent_worker(task: WorkerTask, writer) -> None:
            writer.close()

        monkeypatch.setattr(solve_module, "open_channel", tracking_channel)
        monkeypatch.setattr(solve_module, "read_record", interrupted_read)

        with pytest.raises(Interrupted):
            solve(
                SumConfig(input_path=write_input(b"000111222333"), worker_count=3),
                worker_fn=silent_worker,
            )
        assert len(readers) == 3
        assert all(reader.closed for reader in readers)

def test_serial_mode(write_input, monkeypatch) -> None:
    monkeypatch.setenv(execution.SUMS_EXECUTOR_ENV, "serial")
    result = solve(SumConfig(input_path=write_input(b"000111222333"), worker_count=3))
    # Ranges are "0001", "1122" and "2333".
    assert result.worker_sums == {0: 0, 1: 112, 2: 233}
    assert result.total_sum == 345


def test_process_workers(write_input, monkeypatch) -> None:
    monkeypatch.setenv(execution.SUMS_EXECUTOR_ENV, "processes")
    out = io.StringIO()

    result = solve(SumConfig(input_path=write_input(b"000111222333"), worker_count=2), out)

    assert result.total_sum == 666
    assert result.failed_workers == ()
    assert report_lines(out)[-1] == "Final Sum: 666"


class TestMainSolve:
    """Test cases for main_solve."""

    def test_writes_report_to_file(self, write_input, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv(execution.SUMS_EXECUTOR_ENV, "threads")
        output = tmp_path / "report.txt"

        status = main_solve(SumConfig(input_path=write_input(b"abc123def456"), output_path=str(output)))

        assert status == 0
        assert output.read_text().splitlines() == [
            "File size: 12",
            "Worker 0 Sum: 579",
            "Final Sum: 579",
        ]

    def test_conflicting_config_exit_status(self, write_input, tmp_path, caplog) -> None:
        output = tmp_path / "report.txt"
        config = SumConfig(input_path=write_input(b"1"), output_path=str(output), worker_count=2, block_size=4)

        assert main_solve(config) == 1
        assert output.read_text() == ""
        assert "mutually exclusive" in caplog.text

    def test_missing_input_exit_status(self, tmp_path, caplog) -> None:
        assert main_solve(SumConfig(input_path=str(tmp_path / "missing"))) == 1
        assert "Error checking input file" in caplog.text

    def test_unwritable_output(self, write_input, tmp_path) -> None:
        config = SumConfig(input_path=write_input(b"1"), output_path=str(tmp_path / "no" / "dir.txt"))
        assert main_solve(config) == 1


def test_open_output_stdout_is_left_open() -> None:
    with open_output("-") as out:
        assert out is sys.stdout
    assert not sys.stdout.closed


def test_crashed_worker_process_is_reported(write_input, monkeypatch, caplog) -> None:
    monkeypatch.setenv(execution.SUMS_EXECUTOR_ENV, "processes")
    out = io.StringIO()

    result = solve(
        SumConfig(input_path=write_input(b"000111222333"), worker_count=2),
        out,
        worker_fn=exit_second_worker,
    )

    assert result.total_sum == 111
    assert result.worker_sums == {0: 111}
    assert result.failed_workers == (1,)
    assert report_lines(out) == ["File size: 12", "Worker 0 Sum: 111", "Final Sum: 111"]
    assert "Worker 1 exited with status 3" in caplog.text
    assert "Worker 1 contributed nothing" in caplog.text
