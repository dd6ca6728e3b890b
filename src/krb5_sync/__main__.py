"""
krb5_sync.__main__

Entrypoint for running the tool via `python -m krb5_sync`.
"""

from __future__ import annotations

import sys

from krb5_sync.cli import main

if __name__ == "__main__":
    sys.exit(main())
