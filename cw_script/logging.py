"""
Structured logging setup for cw-script.

Configures **structlog** on top of the stdlib ``logging`` package so that:
- cw-script events and library logs (httpx, asyncio) share one handler,
- output is a readable console rendering by default, or JSON for CI logs,
- exceptions include a formatted stack trace,
- mnemonic / key material never ends up in a log line.

Quick start
-----------
    from cw_script.logging import setup_logging, get_logger

    setup_logging()  # call once on process start
    log = get_logger(__name__)
    log.info("code_uploaded", contract="counter", code_id=42)

Environment
-----------
- CW_SCRIPT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- CW_SCRIPT_LOG_FORMAT: "console" (default) or "json"
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Iterable, Optional

import structlog

REDACT_KEYS = {"mnemonic", "private_key", "seed", "password", "secret"}


def _redact_secrets(_: logging.Logger, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for k in list(event_dict.keys()):
        if k.lower() in REDACT_KEYS and event_dict[k] is not None:
            event_dict[k] = "***"
    return event_dict


def _base_processors() -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.stdlib.add_logger_name
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield structlog.contextvars.merge_contextvars
    yield structlog.processors.StackInfoRenderer()
    yield structlog.processors.format_exc_info
    yield _redact_secrets
    yield structlog.processors.UnicodeDecoder()


def setup_logging(*, level: Optional[str | int] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog + stdlib logging. Safe to call more than once; the
    last call wins.
    """
    level = level or os.getenv("CW_SCRIPT_LOG_LEVEL", "").upper() or "INFO"
    log_format = (log_format or os.getenv("CW_SCRIPT_LOG_FORMAT") or "console").lower()

    processors = list(_base_processors())
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("asyncio").setLevel(os.getenv("LOG_LEVEL_ASYNCIO", "WARNING"))
    logging.getLogger("httpcore").setLevel(os.getenv("LOG_LEVEL_HTTPCORE", "WARNING"))
    logging.getLogger("httpx").setLevel(os.getenv("LOG_LEVEL_HTTPX", "WARNING"))


def get_logger(name: Optional[str] = None) -> Any:
    """
    Return a structlog logger; bind module name if provided.
    """
    log = structlog.get_logger(name) if name else structlog.get_logger()
    return log


__all__ = ["setup_logging", "get_logger"]
