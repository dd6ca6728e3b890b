"""
tests.test_drain

Queue Drain Controller: file lifecycle around parse and dispatch.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from krb5_sync.drain import DrainState, QueueDrainController
from krb5_sync.errors import (
    BackendError,
    CannotOpenQueueFile,
    CannotReadQueueFile,
    CannotUnlinkQueueFile,
    LineTooLong,
    PrincipalParseError,
    UnknownTargetSystem,
)
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import parse_principal
from krb5_sync.models import PasswordChange
from krb5_sync.queue.lines import BoundedLineReader, LineRead
from krb5_sync.queue.reader import QueueRecordReader

from .conftest import FakeBackend

PASSWORD_RECORD = "jdoe@EXAMPLE.ORG\nad\npassword\nNewSecret123\n"


def _controller(backend: FakeBackend, ctx: KerberosContext, **kw) -> QueueDrainController:
    return QueueDrainController(backend=backend, ctx=ctx, **kw)


def test_successful_password_drain_deletes_file(
    backend: FakeBackend, ctx: KerberosContext, write_queue
) -> None:
    path = write_queue(PASSWORD_RECORD)
    controller = _controller(backend, ctx)

    record = controller.drain(path)

    assert record.action == PasswordChange("NewSecret123")
    principal = parse_principal(ctx, "jdoe@EXAMPLE.ORG")
    assert backend.calls == [("password", principal, "NewSecret123", 12)]
    assert not path.exists()
    assert controller.state is DrainState.deleted


def test_backend_failure_keeps_file(ctx: KerberosContext, write_queue) -> None:
    backend = FakeBackend(password_status=17, message="busy")
    path = write_queue(PASSWORD_RECORD)
    controller = _controller(backend, ctx)

    with pytest.raises(BackendError) as exc:
        controller.drain(path)

    assert exc.value.code == 17
    assert path.read_text() == PASSWORD_RECORD
    assert controller.state is DrainState.failed


def test_status_drain(backend: FakeBackend, ctx: KerberosContext, write_queue) -> None:
    path = write_queue("jdoe\nad\ndisable\n")
    _controller(backend, ctx).drain(str(path))
    assert backend.calls == [("status", parse_principal(ctx, "jdoe"), False)]
    assert not path.exists()


def test_unknown_target_keeps_file_and_skips_backend(
    backend: FakeBackend, ctx: KerberosContext, write_queue
) -> None:
    path = write_queue("jdoe\nafs\npassword\nx\n")
    with pytest.raises(UnknownTargetSystem):
        _controller(backend, ctx).drain(path)
    assert path.exists()
    assert backend.calls == []


def test_long_line_keeps_file(backend: FakeBackend, ctx: KerberosContext, write_queue) -> None:
    path = write_queue("jdoe\nad\npassword\n" + "x" * 200 + "\n")
    controller = _controller(backend, ctx, reader=QueueRecordReader(line_limit=64))
    with pytest.raises(LineTooLong):
        controller.drain(path)
    assert path.exists()
    assert backend.calls == []


def test_bad_principal_keeps_file(backend: FakeBackend, ctx: KerberosContext, write_queue) -> None:
    path = write_queue("jdoe@A@B\nad\nenable\n")
    with pytest.raises(PrincipalParseError):
        _controller(backend, ctx).drain(path)
    assert path.exists()
    assert backend.calls == []


def test_second_drain_of_same_file_cannot_open(
    backend: FakeBackend, ctx: KerberosContext, write_queue
) -> None:
    path = write_queue(PASSWORD_RECORD)
    controller = _controller(backend, ctx)
    controller.drain(path)

    with pytest.raises(CannotOpenQueueFile) as exc:
        controller.drain(path)
    assert exc.value.filename == str(path)
    assert len(backend.calls) == 1


def test_unlink_failure_is_reported(
    backend: FakeBackend, ctx: KerberosContext, write_queue, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = write_queue(PASSWORD_RECORD)

    def _refuse(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "unlink", _refuse)
    controller = _controller(backend, ctx)

    with pytest.raises(CannotUnlinkQueueFile, match="unable to unlink queue file"):
        controller.drain(path)
    assert len(backend.calls) == 1
    assert controller.state is DrainState.failed


def test_read_failure_keeps_file(
    backend: FakeBackend, ctx: KerberosContext, write_queue, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = write_queue(PASSWORD_RECORD)

    def _fail(self: BoundedLineReader) -> LineRead:
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(BoundedLineReader, "read_line", _fail)
    controller = _controller(backend, ctx)

    with pytest.raises(CannotReadQueueFile) as exc:
        controller.drain(path)
    assert exc.value.reason == "Input/output error"
    assert controller.state is DrainState.failed
    assert path.exists()
    assert backend.calls == []
