"""
krb5_sync.backends

Synchronization backend package.

Responsibilities:
- Define the contract the dispatcher depends on.
- Provide the Active Directory implementation and the factory used at startup.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The dispatcher depends on `backends.base` only, never on ldap3 directly.
