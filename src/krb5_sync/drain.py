"""
krb5_sync.drain

Queue Drain Controller.

Responsibilities:
- Process exactly one queue file: open, parse, resolve, dispatch, delete.
- Delete the file only after the backend reported success; keep it otherwise.

States:

    OPENED -> PARSED -> DISPATCHED -> DELETED

Any step may instead end in FAILED, with the file left in place. A failed
unlink also ends in FAILED even though the directory was already updated;
the next drain repeats the same (idempotent) change.
"""

from __future__ import annotations

import enum
import os
from pathlib import Path

import structlog

from krb5_sync.backends.base import SyncBackend
from krb5_sync.dispatcher import dispatch
from krb5_sync.errors import CannotOpenQueueFile, CannotUnlinkQueueFile, SyncError
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import parse_principal
from krb5_sync.models import QueueRecord
from krb5_sync.observability.logging import get_logger
from krb5_sync.queue.reader import QueueRecordReader

log = get_logger(__name__)


class DrainState(enum.StrEnum):
    opened = "OPENED"
    parsed = "PARSED"
    dispatched = "DISPATCHED"
    deleted = "DELETED"
    failed = "FAILED"


_ALLOWED_TRANSITIONS: dict[DrainState | None, set[DrainState]] = {
    None: {DrainState.opened, DrainState.failed},
    DrainState.opened: {DrainState.parsed, DrainState.failed},
    DrainState.parsed: {DrainState.dispatched, DrainState.failed},
    DrainState.dispatched: {DrainState.deleted, DrainState.failed},
    DrainState.deleted: set(),
    DrainState.failed: set(),
}


class QueueDrainController:
    def __init__(
        self,
        *,
        backend: SyncBackend,
        ctx: KerberosContext,
        reader: QueueRecordReader | None = None,
    ) -> None:
        self._backend = backend
        self._ctx = ctx
        self._reader = reader or QueueRecordReader()
        self.state: DrainState | None = None

    def drain(self, path: str | os.PathLike[str]) -> QueueRecord:
        filename = os.fspath(path)
        self.state = None
        with structlog.contextvars.bound_contextvars(queue_file=filename):
            try:
                return self._drain(Path(filename), filename)
            except SyncError:
                self._advance(DrainState.failed)
                raise

    def _drain(self, path: Path, filename: str) -> QueueRecord:
        try:
            handle = path.open("rb")
        except OSError as e:
            raise CannotOpenQueueFile(filename, e.strerror or str(e)) from e
        self._advance(DrainState.opened)

        with handle:
            record = self._reader.read(handle, filename)
            self._advance(DrainState.parsed)

            principal = parse_principal(self._ctx, record.principal_name)
            dispatch(
                self._backend,
                self._ctx,
                principal,
                record.action,
                display_name=record.principal_name,
            )
            self._advance(DrainState.dispatched)

        try:
            path.unlink()
        except OSError as e:
            raise CannotUnlinkQueueFile(filename, e.strerror or str(e)) from e
        self._advance(DrainState.deleted)
        return record

    def _advance(self, new_state: DrainState) -> None:
        if new_state not in _ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"invalid drain transition {self.state} -> {new_state}")
        log.debug("queue_drain_state", previous=self.state, state=new_state)
        self.state = new_state


# --- Module Notes -----------------------------------------------------------
# No locking: two processes draining the same file concurrently is unsupported.
# Producers must serialize drain runs over a shared queue directory.
