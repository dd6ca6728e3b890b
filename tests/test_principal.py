"""
tests.test_principal

Principal name parsing and rendering.
"""

from __future__ import annotations

import pytest

from krb5_sync.errors import PrincipalParseError
from krb5_sync.kerberos.context import KerberosContext
from krb5_sync.kerberos.principal import Principal, parse_principal


def test_parses_name_and_realm(ctx: KerberosContext) -> None:
    p = parse_principal(ctx, "jdoe@EXAMPLE.ORG")
    assert p == Principal(components=("jdoe",), realm="EXAMPLE.ORG")
    assert p.name == "jdoe"
    assert p.instance is None


def test_parses_instance(ctx: KerberosContext) -> None:
    p = parse_principal(ctx, "jdoe/admin@OTHER.ORG")
    assert p.components == ("jdoe", "admin")
    assert p.instance == "admin"
    assert p.realm == "OTHER.ORG"


def test_default_realm_applies_when_missing(ctx: KerberosContext) -> None:
    assert parse_principal(ctx, "jdoe").realm == "EXAMPLE.ORG"


def test_missing_realm_without_default_is_rejected() -> None:
    with pytest.raises(PrincipalParseError, match="no default realm"):
        parse_principal(KerberosContext(), "jdoe")


def test_escapes_are_honoured(ctx: KerberosContext) -> None:
    p = parse_principal(ctx, r"we\/ird\@name@EXAMPLE.ORG")
    assert p.components == ("we/ird@name",)
    assert p.unparse() == r"we\/ird\@name@EXAMPLE.ORG"


def test_slash_in_realm_is_literal(ctx: KerberosContext) -> None:
    assert parse_principal(ctx, "jdoe@EX/AMPLE").realm == "EX/AMPLE"


@pytest.mark.parametrize(
    "text",
    ["", "@EXAMPLE.ORG", "jdoe@", "jdoe@A@B", "jdoe\\"],
)
def test_malformed_names_are_rejected(ctx: KerberosContext, text: str) -> None:
    with pytest.raises(PrincipalParseError) as exc:
        parse_principal(ctx, text)
    assert exc.value.text == text
    assert str(exc.value).startswith(f"cannot parse user {text} into principal")
