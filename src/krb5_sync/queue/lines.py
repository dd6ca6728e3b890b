"""
krb5_sync.queue.lines

Bounded line reading over a binary file handle.

Responsibilities:
- Read one line without ever buffering more than `limit` bytes.
- Report which of three things happened: a terminated line, a full buffer with
  no terminator, or end of input.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO

TERMINATOR = b"\n"


class LineStatus(enum.StrEnum):
    complete = "COMPLETE"
    too_long = "TOO_LONG"
    eof = "EOF"


@dataclass(frozen=True, slots=True)
class LineRead:
    status: LineStatus
    data: bytes = b""


class BoundedLineReader:
    """
    `limit` counts the terminator, so the longest accepted line carries
    `limit - 1` bytes of content.
    """

    def __init__(self, handle: BinaryIO, *, limit: int) -> None:
        if limit < 2:
            raise ValueError("line limit must leave room for content and terminator")
        self._handle = handle
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def read_line(self) -> LineRead:
        raw = self._handle.readline(self._limit)
        if raw.endswith(TERMINATOR):
            return LineRead(LineStatus.complete, raw[: -len(TERMINATOR)])
        if len(raw) >= self._limit:
            return LineRead(LineStatus.too_long, raw)
        # Nothing read, or a final line cut off before its terminator.
        return LineRead(LineStatus.eof, raw)


# --- Module Notes -----------------------------------------------------------
# A partial last line counts as end of input: every queue line must be terminated.
