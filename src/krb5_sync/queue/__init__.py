"""
krb5_sync.queue

Queue file handling.

Responsibilities:
- Bounded, terminator-aware line reading.
- Parsing one queue file into a `QueueRecord`.
"""

# Package marker.
