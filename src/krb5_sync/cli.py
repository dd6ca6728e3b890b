"""
krb5_sync.cli

Request Router and process entry point.

Responsibilities:
- Parse and validate the command line before any I/O or backend call.
- Initialize the backend once and release it on every exit path.
- Route to an immediate dispatch or to the queue drain controller.
- Translate any `SyncError` into a diagnostic on stderr and a non-zero status.

Usage:

    krb5-sync [-d | -e] [-p <pass>] <user>
    krb5-sync -f <file>
"""

from __future__ import annotations

import contextlib
import getopt
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from krb5_sync.backends.base import BackendFactory, SyncBackend
from krb5_sync.backends.factory import build_backend
from krb5_sync.dispatcher import dispatch
from krb5_sync.drain import QueueDrainController
from krb5_sync.errors import SyncError, UsageError
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import parse_principal
from krb5_sync.models import Action, PasswordChange, status_action
from krb5_sync.observability.logging import configure_logging, get_logger
from krb5_sync.queue.reader import QueueRecordReader
from krb5_sync.settings import Settings, get_settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ImmediateRequest:
    user: str
    actions: tuple[Action, ...]


@dataclass(frozen=True, slots=True)
class QueueRequest:
    queue_file: str


Request = ImmediateRequest | QueueRequest


def _action_usage(prog: str) -> str:
    return f"Usage: {prog} [-d | -e] [-p <pass>] <user>"


def _queue_usage(prog: str) -> str:
    return f"Usage: {prog} -f <file>"


_OPTSTRING = "def:p:"


def _getopt(argv: Sequence[str], prog: str) -> tuple[dict[str, str], list[str]]:
    # An option argument is the next word verbatim, even when it starts with "-".
    try:
        pairs, users = getopt.gnu_getopt(list(argv), _OPTSTRING)
    except getopt.GetoptError as e:
        raise UsageError(e.msg, usage=_action_usage(prog)) from e
    return {opt: value for opt, value in pairs}, users


def parse_request(argv: Sequence[str], *, prog: str = "krb5-sync") -> Request:
    opts, users = _getopt(argv, prog)
    queue_file = opts.get("-f")
    password = opts.get("-p")
    enable = "-e" in opts
    disable = "-d" in opts

    if queue_file is None and len(users) != 1:
        raise UsageError("exactly one user is required", usage=_action_usage(prog))
    if queue_file is not None and users:
        raise UsageError("no user may be given with -f", usage=_queue_usage(prog))
    if enable and disable:
        raise UsageError("cannot specify both -d and -e")
    if not enable and not disable and password is None and queue_file is None:
        raise UsageError("no action specified")
    if queue_file is not None and (enable or disable or password is not None):
        raise UsageError("must specify queue file or action, not both")

    if queue_file is not None:
        return QueueRequest(queue_file=queue_file)

    # Password and -d/-e are not mutually exclusive; both are dispatched.
    actions: list[Action] = []
    if password is not None:
        if not password:
            raise UsageError("password must not be empty")
        actions.append(PasswordChange(password))
    if enable or disable:
        actions.append(status_action(enabled=enable))
    return ImmediateRequest(user=users[0], actions=tuple(actions))


def route(
    request: Request,
    *,
    backend: SyncBackend,
    ctx: KerberosContext,
    line_limit: int,
) -> None:
    if isinstance(request, QueueRequest):
        controller = QueueDrainController(
            backend=backend,
            ctx=ctx,
            reader=QueueRecordReader(line_limit=line_limit),
        )
        controller.drain(request.queue_file)
        return

    principal = parse_principal(ctx, request.user)
    for action in request.actions:
        dispatch(backend, ctx, principal, action, display_name=request.user)


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    backend_factory: BackendFactory | None = None,
) -> int:
    settings = settings or get_settings()
    prog = settings.program_name

    configure_logging(
        program_name=prog,
        level=settings.log_level,
        json_output=settings.log_json,
        syslog_address=settings.syslog_address if settings.syslog else None,
    )

    try:
        request = parse_request(sys.argv[1:] if argv is None else argv, prog=prog)
    except UsageError as e:
        print(e.usage or f"{prog}: {e.message}", file=sys.stderr)
        return e.exit_code

    ctx = KerberosContext.from_settings(settings)
    backend_factory = backend_factory or build_backend

    try:
        backend = backend_factory(settings, ctx)
        with contextlib.closing(backend):
            route(request, backend=backend, ctx=ctx, line_limit=settings.queue_line_limit)
    except SyncError as e:
        log.error("sync_failed", error=e.message, kind=type(e).__name__)
        print(f"{prog}: {e.message}", file=sys.stderr)
        return e.exit_code

    return 0


# --- Module Notes -----------------------------------------------------------
# Exit status: 0 on success, 1 for any usage or operational error. Retries happen
# by re-running against the same queue file, never inside one invocation.
