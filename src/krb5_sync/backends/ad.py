"""
krb5_sync.backends.ad

Active Directory backend (ldap3).

Responsibilities:
- Bind to AD once per process.
- Map a Kerberos principal to an AD account (sAMAccountName).
- Push password changes and toggle the ACCOUNTDISABLE bit of userAccountControl.

Every call returns a `BackendResult` carrying the LDAP result code; transport
errors raised by ldap3 become status -1 with the exception text.
"""

from __future__ import annotations

from typing import Any

import ldap3
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from krb5_sync.backends.base import BackendResult, truncate_message
from krb5_sync.errors import BackendInitError
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import Principal
from krb5_sync.observability.logging import get_logger
from krb5_sync.settings import Settings

log = get_logger(__name__)

ACCOUNTDISABLE = 0x2
NO_SUCH_OBJECT = 32
UNWILLING_TO_PERFORM = 53
TRANSPORT_ERROR = -1


class ADBackend:
    def __init__(
        self,
        *,
        connection: Any,
        base_dn: str,
        base_instance: str | None = None,
        message_limit: int = 8192,
    ) -> None:
        self._conn = connection
        self._base_dn = base_dn
        self._base_instance = base_instance
        self._message_limit = message_limit

    @classmethod
    def init(cls, settings: Settings, ctx: KerberosContext) -> ADBackend:
        server = ldap3.Server(
            settings.ad_ldap_host,
            port=settings.ad_ldap_port,
            use_ssl=settings.ad_use_ssl,
            get_info=ldap3.NONE,
            connect_timeout=settings.ad_timeout,
        )
        if settings.ad_bind_dn:
            conn = ldap3.Connection(
                server,
                user=settings.ad_bind_dn,
                password=settings.ad_bind_password,
                authentication=ldap3.SIMPLE,
                receive_timeout=settings.ad_timeout,
            )
        else:
            # Kerberos bind with whatever credential cache the process was started with.
            conn = ldap3.Connection(
                server,
                authentication=ldap3.SASL,
                sasl_mechanism=ldap3.KERBEROS,
                receive_timeout=settings.ad_timeout,
            )

        try:
            bound = conn.bind()
        except LDAPException as e:
            raise BackendInitError(f"cannot connect to AD at {settings.ad_ldap_host}: {e}") from e
        if not bound:
            raise BackendInitError(
                f"cannot bind to AD at {settings.ad_ldap_host}: {_describe(conn.result)}"
            )

        log.debug("ad_backend_bound", host=settings.ad_ldap_host, base=settings.ad_ldap_base)
        return cls(
            connection=conn,
            base_dn=settings.ad_ldap_base,
            base_instance=settings.ad_base_instance,
            message_limit=settings.message_limit,
        )

    def change_password(
        self, ctx: KerberosContext, principal: Principal, password: str
    ) -> BackendResult:
        account = self._account_name(principal)
        if account is None:
            return self._unmapped(principal)
        try:
            found = self._find_user(account)
            if isinstance(found, BackendResult):
                return found
            dn, _ = found
            self._conn.extend.microsoft.modify_password(dn, password)
            return self._result()
        except LDAPException as e:
            return self._failure(TRANSPORT_ERROR, str(e))

    def change_status(
        self, ctx: KerberosContext, principal: Principal, *, enabled: bool
    ) -> BackendResult:
        account = self._account_name(principal)
        if account is None:
            return self._unmapped(principal)
        try:
            found = self._find_user(account)
            if isinstance(found, BackendResult):
                return found
            dn, flags = found
            wanted = flags & ~ACCOUNTDISABLE if enabled else flags | ACCOUNTDISABLE
            if wanted == flags:
                log.debug("ad_status_unchanged", account=account, enabled=enabled)
                return BackendResult(status=0)
            self._conn.modify(dn, {"userAccountControl": [(ldap3.MODIFY_REPLACE, [str(wanted)])]})
            return self._result()
        except LDAPException as e:
            return self._failure(TRANSPORT_ERROR, str(e))

    def close(self) -> None:
        try:
            self._conn.unbind()
        except LDAPException as e:
            log.warning("ad_unbind_failed", error=str(e))

    def _account_name(self, principal: Principal) -> str | None:
        if len(principal.components) == 1:
            return principal.name
        if self._base_instance and principal.components[1:] == (self._base_instance,):
            return principal.name
        return None

    def _find_user(self, account: str) -> tuple[str, int] | BackendResult:
        self._conn.search(
            search_base=self._base_dn,
            search_filter=f"(&(objectClass=user)(sAMAccountName={escape_filter_chars(account)}))",
            search_scope=ldap3.SUBTREE,
            attributes=["userAccountControl"],
        )
        code = int(self._conn.result.get("result", TRANSPORT_ERROR))
        if code != 0:
            return self._failure(code, _describe(self._conn.result))

        entries = [r for r in self._conn.response or [] if r.get("type") == "searchResEntry"]
        if not entries:
            return self._failure(NO_SUCH_OBJECT, f"no AD account {account} under {self._base_dn}")
        entry = entries[0]
        return entry["dn"], _flags(entry.get("attributes", {}).get("userAccountControl"))

    def _unmapped(self, principal: Principal) -> BackendResult:
        return self._failure(
            UNWILLING_TO_PERFORM, f"principal {principal} does not map to an AD account"
        )

    def _result(self) -> BackendResult:
        code = int(self._conn.result.get("result", TRANSPORT_ERROR))
        if code == 0:
            return BackendResult(status=0)
        return self._failure(code, _describe(self._conn.result))

    def _failure(self, code: int, message: str) -> BackendResult:
        return BackendResult(status=code, message=truncate_message(message, self._message_limit))


def _describe(result: dict[str, Any] | None) -> str:
    if not result:
        return "no result from server"
    parts = [str(result.get("description") or ""), str(result.get("message") or "")]
    return ": ".join(p for p in parts if p) or "unknown error"


def _flags(raw: Any) -> int:
    # Without schema info ldap3 may hand back a list of strings.
    if isinstance(raw, list | tuple):
        raw = raw[0] if raw else 0
    if raw is None or raw == "":
        return 0
    return int(raw)


# --- Module Notes -----------------------------------------------------------
# Password changes over LDAP require an encrypted channel; keep ad_use_ssl on
# outside of test directories.
