"""
krb5_sync.observability.logging

Structured logging configuration for the tool.

Responsibilities:
- Configure `structlog` for console or JSON lines on stdout.
- Optionally mirror every record to syslog (facility LOG_AUTH).
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import Any

import structlog


def configure_logging(
    *,
    program_name: str,
    level: str,
    json_output: bool = False,
    syslog_address: str | None = None,
) -> None:
    """
    Called once per process, before the backend is initialized.
    """

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if syslog_address:
        handlers.append(_syslog_handler(program_name, syslog_address))

    # force=True so repeated in-process invocations (tests) pick up the current stdout.
    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_program_name(program_name),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _syslog_handler(program_name: str, address: str) -> logging.Handler:
    handler = logging.handlers.SysLogHandler(
        address=address,
        facility=logging.handlers.SysLogHandler.LOG_AUTH,
    )
    handler.ident = f"{program_name}[{os.getpid()}]: "
    return handler


def _add_program_name(program_name: str):
    # Stable "program" field so aggregated logs can be filtered per tool.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("program", program_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# The drain controller binds `queue_file` via contextvars so every line emitted
# while a queue file is processed carries it.
