"""Three-digit group scanning and summing."""

from typing import BinaryIO

from file_summer.partition.types import BUFFER_SIZE, BlockRange

# Every byte except ASCII '0'-'9'; stripped before grouping.
_NON_DIGITS = bytes(b for b in range(256) if not 0x30 <= b <= 0x39)

GROUP_WIDTH = 3


class DigitGroupScanner:
    """
    Incrementally sum fixed-width decimal groups.

    Digits accumulate into groups of three regardless of what separates
    them; each complete group is added to the total as an unsigned decimal
    number (leading zeros allowed). A partially filled group is held until
    more digits arrive and is never counted on its own.
    """

    def __init__(self) -> None:
        self._pending = b""
        self._total = 0

    @property
    def total(self) -> int:
        return self._total

    @property
    def pending(self) -> bytes:
        """Digits of the group currently being filled."""
        return self._pending

    def feed(self, chunk: bytes) -> None:
        digits = self._pending + chunk.translate(None, _NON_DIGITS)
        complete = len(digits) - len(digits) % GROUP_WIDTH
        self._total += sum(
            int(digits[i : i + GROUP_WIDTH]) for i in range(0, complete, GROUP_WIDTH)
        )
        self._pending = digits[complete:]


def sum_digit_groups(data: bytes) -> int:
    """Sum the complete digit groups of an in-memory buffer."""
    scanner = DigitGroupScanner()
    scanner.feed(data)
    return scanner.total


def scan_stream(
    stream: BinaryIO,
    limit: int | None = None,
    buffer_size: int = BUFFER_SIZE,
) -> int:
    """Scan at most `limit` bytes from `stream` (all of it when None) and return the sum."""
    scanner = DigitGroupScanner()
    remaining = limit

    while remaining is None or remaining > 0:
        size = buffer_size if remaining is None else min(buffer_size, remaining)
        chunk = stream.read(size)
        if not chunk:
            break
        scanner.feed(chunk)
        if remaining is not None:
            remaining -= len(chunk)

    return scanner.total


def sum_range(path: str, block: BlockRange) -> int:
    """Open `path` independently, seek to the block and sum its bytes."""
    with open(path, "rb") as handle:
        if block.start:
            handle.seek(block.start)
        return scan_stream(handle, block.span())
