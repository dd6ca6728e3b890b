"""
krb5_sync.kerberos

Kerberos-side collaborators.

Responsibilities:
- The per-process administration context.
- Parsing textual principal names into `Principal` handles.
"""

# Package marker; import from submodules.
