"""
krb5_sync.kerberos.context

Administration context threaded through resolver and backend calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from krb5_sync.settings import Settings


@dataclass(frozen=True, slots=True)
class KerberosContext:
    # Realm used for names written without "@REALM"; None makes such names invalid.
    default_realm: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> KerberosContext:
        return cls(default_realm=settings.default_realm or None)


# --- Module Notes -----------------------------------------------------------
# Created exactly once by the entry point; never stored in module globals.
