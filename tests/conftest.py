"""
tests.conftest

Shared fixtures.

Responsibilities:
- Provide a recording fake backend with scripted status codes.
- Provide settings and a Kerberos context suitable for tests.
- Write queue files into a temporary directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from krb5_sync.backends.base import BackendResult
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import Principal
from krb5_sync.settings import Settings


@dataclass
class FakeBackend:
    password_status: int = 0
    status_status: int = 0
    message: str = ""
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    closed: bool = False

    def change_password(
        self, ctx: KerberosContext, principal: Principal, password: str
    ) -> BackendResult:
        self.calls.append(("password", principal, password, len(password)))
        return BackendResult(status=self.password_status, message=self.message)

    def change_status(
        self, ctx: KerberosContext, principal: Principal, *, enabled: bool
    ) -> BackendResult:
        self.calls.append(("status", principal, enabled))
        return BackendResult(status=self.status_status, message=self.message)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    # main() points the root logger at the current stdout; drop it once the test ends.
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def ctx() -> KerberosContext:
    return KerberosContext(default_realm="EXAMPLE.ORG")


@pytest.fixture
def settings() -> Settings:
    return Settings(default_realm="EXAMPLE.ORG", syslog=False, log_level="DEBUG")


@pytest.fixture
def write_queue(tmp_path: Path):
    def _write(content: str | bytes, name: str = "queue-entry") -> Path:
        path = tmp_path / name
        data = content.encode("utf-8") if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _write
