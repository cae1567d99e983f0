"""Worker-to-coordinator result transport."""

from file_summer.channel.protocol import (
    RECORD_FORMAT,
    RECORD_SIZE,
    ReadOutcome,
    ResultRecord,
    open_channel,
    read_record,
    send_record,
)

__all__ = [
    "RECORD_FORMAT",
    "RECORD_SIZE",
    "ReadOutcome",
    "ResultRecord",
    "open_channel",
    "read_record",
    "send_record",
]
