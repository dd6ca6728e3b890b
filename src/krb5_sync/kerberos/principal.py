"""
krb5_sync.kerberos.principal

Principal handles and the textual-name resolver.

Responsibilities:
- Parse `name[/instance...]@REALM` following Kerberos quoting rules.
- Render a principal back to its canonical text.

Quoting: `\\` escapes the next character; `\\n`, `\\t`, `\\b` and `\\0` stand for
newline, tab, backspace and NUL. Components are split on unescaped `/`, and the
realm starts after the first unescaped `@` (where `/` is an ordinary character).
"""

from __future__ import annotations

from dataclasses import dataclass

from krb5_sync.errors import PrincipalParseError
from krb5_sync.kerberos.context import KerberosContext

_UNESCAPE = {"n": "\n", "t": "\t", "b": "\b", "0": "\0"}
_ESCAPE = {v: k for k, v in _UNESCAPE.items()}
_COMPONENT_SPECIALS = "/@\\"
_REALM_SPECIALS = "@\\"


@dataclass(frozen=True, slots=True)
class Principal:
    components: tuple[str, ...]
    realm: str

    @property
    def name(self) -> str:
        return self.components[0]

    @property
    def instance(self) -> str | None:
        if len(self.components) < 2:
            return None
        return "/".join(self.components[1:])

    def unparse(self) -> str:
        name = "/".join(_quote(c, specials=_COMPONENT_SPECIALS) for c in self.components)
        realm = _quote(self.realm, specials=_REALM_SPECIALS)
        return f"{name}@{realm}"

    def __str__(self) -> str:
        return self.unparse()


def _quote(text: str, *, specials: str) -> str:
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPE:
            out.append("\\" + _ESCAPE[ch])
        elif ch in specials:
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "".join(out)


def parse_principal(ctx: KerberosContext, text: str) -> Principal:
    if not text:
        raise PrincipalParseError(text, "empty principal name")

    components: list[str] = []
    current: list[str] = []
    realm: list[str] | None = None

    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, None)
            if nxt is None:
                raise PrincipalParseError(text, "trailing backslash")
            target = realm if realm is not None else current
            target.append(_UNESCAPE.get(nxt, nxt))
        elif ch == "@":
            if realm is not None:
                raise PrincipalParseError(text, "more than one realm separator")
            components.append("".join(current))
            realm = []
        elif ch == "/" and realm is None:
            components.append("".join(current))
            current = []
        elif realm is not None:
            realm.append(ch)
        else:
            current.append(ch)

    if realm is None:
        components.append("".join(current))
        if not ctx.default_realm:
            raise PrincipalParseError(text, "no realm given and no default realm configured")
        realm_text = ctx.default_realm
    else:
        realm_text = "".join(realm)
        if not realm_text:
            raise PrincipalParseError(text, "empty realm")

    if not components[0]:
        raise PrincipalParseError(text, "empty name component")

    return Principal(components=tuple(components), realm=realm_text)


# --- Module Notes -----------------------------------------------------------
# This resolver is the only place principal text is interpreted; both the
# command-line path and the queue path go through `parse_principal`.
