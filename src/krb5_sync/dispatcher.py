"""
krb5_sync.dispatcher

Action Dispatcher.

Responsibilities:
- Send one resolved action to the backend.
- Log a notice on success; raise `BackendError` on any non-zero status.
"""

from __future__ import annotations

from krb5_sync.backends.base import BackendResult, SyncBackend
from krb5_sync.errors import BackendError
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import Principal
from krb5_sync.models import Action, Disable, Enable, PasswordChange
from krb5_sync.observability.logging import get_logger

log = get_logger(__name__)


def dispatch(
    backend: SyncBackend,
    ctx: KerberosContext,
    principal: Principal,
    action: Action,
    *,
    display_name: str,
) -> None:
    """
    `display_name` is the principal text as the caller supplied it; it is what
    operators see in notices and errors.
    """

    result: BackendResult
    if isinstance(action, PasswordChange):
        result = backend.change_password(ctx, principal, action.password)
    elif isinstance(action, Enable | Disable):
        result = backend.change_status(ctx, principal, enabled=action.enabled)
    else:
        raise TypeError(f"unsupported action {action!r}")

    if not result.ok:
        raise BackendError(
            operation=action.operation,
            target=display_name,
            code=result.status,
            message=result.message,
        )

    if isinstance(action, PasswordChange):
        log.info("ad_password_change_succeeded", user=display_name)
    else:
        log.info("ad_status_change_succeeded", user=display_name, enabled=action.enabled)


# --- Module Notes -----------------------------------------------------------
# No retries here: a failed call ends the current unit of work and the queue
# file (if any) stays on disk for the next run.
