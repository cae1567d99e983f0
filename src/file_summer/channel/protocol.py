"""One-shot result channel between a worker and the coordinator."""

import multiprocessing
import struct
from dataclasses import dataclass
from multiprocessing.connection import Connection

from file_summer.errors import SetupFailure, WorkerIOFailure

# Little-endian, no padding: u16 worker id followed by u64 sum.
RECORD_FORMAT = "<HQ"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """The single value a worker reports: which range it scanned and its sum."""

    worker_id: int
    sum: int

    def pack(self) -> bytes:
        try:
            return struct.pack(RECORD_FORMAT, self.worker_id, self.sum)
        except struct.error as exc:
            raise ValueError(f"record out of range: {self}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "ResultRecord":
        if len(data) != RECORD_SIZE:
            raise ValueError(f"expected {RECORD_SIZE} bytes, got {len(data)}")
        worker_id, total = struct.unpack(RECORD_FORMAT, data)
        return cls(worker_id, total)


@dataclass(frozen=True, slots=True)
class ReadOutcome:
    """Result of the one read attempted on a ready channel."""

    worker_id: int
    record: ResultRecord | None = None
    error: WorkerIOFailure | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def open_channel() -> tuple[Connection, Connection]:
    """Create a one-way pipe; returns (read end, write end)."""
    try:
        return multiprocessing.Pipe(duplex=False)
    except OSError as exc:
        raise SetupFailure(f"Error creating pipes for worker: {exc}") from exc


def send_record(writer: Connection, record: ResultRecord) -> None:
    """Write the record and close the write end so the reader sees EOF afterwards."""
    try:
        writer.send_bytes(record.pack())
    finally:
        writer.close()


def read_record(reader: Connection, worker_id: int) -> ReadOutcome:
    """
    Attempt exactly one record read from a ready channel.

    A closed channel, a payload of the wrong size, or a record naming a
    different worker is reported as a failed outcome. Nothing is retried.
    """
    try:
        data = reader.recv_bytes()
    except EOFError:
        return _failed(worker_id, "channel closed without a result")
    except OSError as exc:
        return _failed(worker_id, f"channel read failed: {exc}")

    if len(data) != RECORD_SIZE:
        return _failed(worker_id, f"short record ({len(data)} of {RECORD_SIZE} bytes)")

    record = ResultRecord.unpack(data)
    if record.worker_id != worker_id:
        return _failed(worker_id, f"record claims worker {record.worker_id}")
    return ReadOutcome(worker_id, record=record)


def _failed(worker_id: int, reason: str) -> ReadOutcome:
    return ReadOutcome(worker_id, error=WorkerIOFailure(worker_id, reason))
