"""
krb5_sync.backends.base

Backend boundary.

Responsibilities:
- Describe the calls a synchronization backend must support.
- Carry a backend's numeric status and bounded diagnostic text.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import Principal
from krb5_sync.settings import Settings

DEFAULT_MESSAGE_LIMIT = 8192


@dataclass(frozen=True, slots=True)
class BackendResult:
    # 0 is success; anything else is a backend-specific failure code.
    status: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


def truncate_message(message: str, limit: int = DEFAULT_MESSAGE_LIMIT) -> str:
    # Diagnostics are bounded; anything past the limit is dropped.
    return message[:limit]


class SyncBackend(Protocol):
    def change_password(
        self, ctx: KerberosContext, principal: Principal, password: str
    ) -> BackendResult: ...

    def change_status(
        self, ctx: KerberosContext, principal: Principal, *, enabled: bool
    ) -> BackendResult: ...

    def close(self) -> None: ...


# Called once per process, before any dispatch.
BackendFactory = Callable[[Settings, KerberosContext], SyncBackend]
