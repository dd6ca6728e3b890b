"""
krb5_sync.backends.factory

Startup wiring for the synchronization backend.
"""

from __future__ import annotations

from krb5_sync.backends.ad import ADBackend
from krb5_sync.backends.base import SyncBackend
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.settings import Settings


def build_backend(settings: Settings, ctx: KerberosContext) -> SyncBackend:
    # AD is the only target system today.
    return ADBackend.init(settings, ctx)
