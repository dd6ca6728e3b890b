"""
krb5_sync.models

Domain types shared by the queue reader, the dispatcher and the entry point.

Responsibilities:
- Define the closed `Action` variant (password change, enable, disable).
- Define the target systems a queue record may name.
- Define `QueueRecord`, the in-memory form of one queue file.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class TargetSystem(enum.StrEnum):
    # Tokens as they appear on line 2 of a queue file.
    ad = "ad"


class ActionToken(enum.StrEnum):
    # Tokens as they appear on line 3 of a queue file.
    enable = "enable"
    disable = "disable"
    password = "password"


@dataclass(frozen=True, slots=True)
class PasswordChange:
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.password:
            raise ValueError("password must not be empty")

    @property
    def operation(self) -> str:
        return "password"


@dataclass(frozen=True, slots=True)
class Enable:
    @property
    def operation(self) -> str:
        return "status"

    @property
    def enabled(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Disable:
    @property
    def operation(self) -> str:
        return "status"

    @property
    def enabled(self) -> bool:
        return False


Action = PasswordChange | Enable | Disable


def status_action(*, enabled: bool) -> Enable | Disable:
    return Enable() if enabled else Disable()


@dataclass(frozen=True, slots=True)
class QueueRecord:
    """
    One queue file, validated. `principal_name` is kept verbatim so log lines
    show exactly what the producer wrote.
    """

    principal_name: str
    target_system: TargetSystem
    action: Action


# --- Module Notes -----------------------------------------------------------
# A separate pair of enable/disable booleans would allow "both set"; the variant
# makes that state unrepresentable.
