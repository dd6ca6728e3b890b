"""
krb5_sync.observability

Observability package.

Responsibilities:
- Structured logging configuration shared by the entry point and all layers.
"""

# Package marker.
