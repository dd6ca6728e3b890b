"""
krb5_sync.errors

Exception taxonomy for the sync tool.

Responsibilities:
- Give every failure path a typed exception carrying enough context to diagnose.
- Let the entry point map any `SyncError` to a diagnostic and exit status.

Two tiers share the same base: usage/validation problems (bad flags, malformed
queue files) and operational problems (principal parsing, backend, filesystem).
Both end the invocation; nothing here is retried.
"""

from __future__ import annotations


class SyncError(Exception):
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UsageError(SyncError):
    """
    Bad command-line combination. `usage` is printed verbatim when set;
    otherwise the message is reported like any other error.
    """

    def __init__(self, message: str, *, usage: str | None = None) -> None:
        self.usage = usage
        super().__init__(message)


class QueueFileError(SyncError):
    def __init__(self, message: str, *, filename: str) -> None:
        self.filename = filename
        super().__init__(message)


class CannotOpenQueueFile(QueueFileError):
    def __init__(self, filename: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"cannot open queue file {filename}: {reason}", filename=filename)


class CannotReadQueueFile(QueueFileError):
    def __init__(self, filename: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"cannot read from queue file {filename}: {reason}", filename=filename)


class LineTooLong(QueueFileError):
    def __init__(self, filename: str, *, limit: int) -> None:
        self.limit = limit
        super().__init__(f"line too long in queue file {filename}", filename=filename)


class TruncatedQueueFile(QueueFileError):
    def __init__(self, filename: str, *, line_number: int) -> None:
        self.line_number = line_number
        super().__init__(
            f"cannot read line {line_number} from queue file {filename}: unexpected end of file",
            filename=filename,
        )


class InvalidQueueLine(QueueFileError):
    def __init__(self, filename: str, *, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(
            f"invalid line {line_number} in queue file {filename}: {reason}", filename=filename
        )


class UnknownTargetSystem(QueueFileError):
    def __init__(self, filename: str, token: str) -> None:
        self.token = token
        super().__init__(
            f"unknown target system {token} in queue file {filename}", filename=filename
        )


class UnknownAction(QueueFileError):
    def __init__(self, filename: str, token: str) -> None:
        self.token = token
        super().__init__(f"unknown action {token} in queue file {filename}", filename=filename)


class CannotUnlinkQueueFile(QueueFileError):
    def __init__(self, filename: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"unable to unlink queue file {filename}: {reason}", filename=filename)


class PrincipalParseError(SyncError):
    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"cannot parse user {text} into principal: {reason}")


class BackendInitError(SyncError):
    pass


class BackendError(SyncError):
    """
    A backend call reported a non-zero status. `code` and `message` are the
    backend's own.
    """

    def __init__(self, *, operation: str, target: str, code: int, message: str) -> None:
        self.operation = operation
        self.target = target
        self.code = code
        self.backend_message = message
        super().__init__(f"AD {operation} change for {target} failed ({code}): {message}")


# --- Module Notes -----------------------------------------------------------
# Wording of these messages is relied on by operators grepping logs; change with care.
