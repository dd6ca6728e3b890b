"""
krb5_sync.queue.reader

Queue Record Reader: turns one queue file into a validated `QueueRecord`.

Responsibilities:
- Read the fixed 3-or-4 line record and nothing more.
- Reject unknown target systems and actions with the offending token.

Format:

    <principal>
    ad
    enable | disable | password
    [<password>]

Anything after the record is ignored.
"""

from __future__ import annotations

from typing import BinaryIO

from krb5_sync.errors import (
    CannotReadQueueFile,
    InvalidQueueLine,
    LineTooLong,
    TruncatedQueueFile,
    UnknownAction,
    UnknownTargetSystem,
)
from krb5_sync.models import (
    Action,
    ActionToken,
    Disable,
    Enable,
    PasswordChange,
    QueueRecord,
    TargetSystem,
)
from krb5_sync.queue.lines import BoundedLineReader, LineStatus

DEFAULT_LINE_LIMIT = 8192


class QueueRecordReader:
    def __init__(self, *, line_limit: int = DEFAULT_LINE_LIMIT) -> None:
        self._line_limit = line_limit

    def read(self, handle: BinaryIO, filename: str) -> QueueRecord:
        lines = _RecordLines(BoundedLineReader(handle, limit=self._line_limit), filename)

        principal_name = lines.next()

        target_token = lines.next()
        try:
            target = TargetSystem(target_token)
        except ValueError:
            raise UnknownTargetSystem(filename, target_token) from None

        action_token = lines.next()
        try:
            token = ActionToken(action_token)
        except ValueError:
            raise UnknownAction(filename, action_token) from None

        action: Action
        if token is ActionToken.password:
            secret = lines.next()
            if not secret:
                raise InvalidQueueLine(filename, line_number=lines.count, reason="empty password")
            action = PasswordChange(secret)
        elif token is ActionToken.enable:
            action = Enable()
        else:
            action = Disable()

        return QueueRecord(principal_name=principal_name, target_system=target, action=action)


class _RecordLines:
    # Numbers lines and converts reader outcomes into queue file errors.

    def __init__(self, reader: BoundedLineReader, filename: str) -> None:
        self._reader = reader
        self._filename = filename
        self.count = 0

    def next(self) -> str:
        self.count += 1
        try:
            line = self._reader.read_line()
        except OSError as e:
            raise CannotReadQueueFile(self._filename, e.strerror or str(e)) from e
        if line.status is LineStatus.too_long:
            raise LineTooLong(self._filename, limit=self._reader.limit)
        if line.status is LineStatus.eof:
            raise TruncatedQueueFile(self._filename, line_number=self.count)
        try:
            return line.data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidQueueLine(
                self._filename,
                line_number=self.count,
                reason=f"unsupported encoding, expected UTF-8 ({e.reason})",
            ) from e


# --- Module Notes -----------------------------------------------------------
# Tokens are matched case-sensitively; "AD" or "Password" are rejected.
