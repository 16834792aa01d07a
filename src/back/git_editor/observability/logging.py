"""Structured logging for git-editor.

All log output goes through structlog and is rendered once, by the
stdlib root handler, so uvicorn and library records share the format.

Two processors are specific to the proxy:

- ``_add_request_id`` stamps the current ``X-Request-ID`` on each entry.
- ``_scrub_secrets`` shortens any field whose name marks it as a
  credential (access token, session id, auth header). Call sites should
  still prefer ``redact()`` explicitly; the processor catches the rest.

Usage::

    from git_editor.observability.logging import configure_logging, get_logger

    configure_logging()  # once, from create_app()
    logger = get_logger(__name__)
    logger.info("session_created", login="alice", session_id=sid)
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

SECRET_FIELDS = frozenset({
    "token",
    "access_token",
    "github_token",
    "session_id",
    "authorization",
})

_configured = False


def redact(secret: str | None, keep: int = 6) -> str:
    """Shorten a credential or session id to a loggable prefix."""
    if not secret:
        return ""
    if len(secret) <= keep:
        return "***"
    return f"{secret[:keep]}***"


def _add_request_id(logger: Any, method_name: str, event_dict: dict) -> dict:
    rid = request_id_ctx.get()
    if rid is not None:
        event_dict.setdefault("request_id", rid)
    return event_dict


def _scrub_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    for key in SECRET_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and not value.endswith("***"):
            event_dict[key] = redact(value)
    return event_dict


def build_processors() -> list:
    """Processor chain shared by structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_request_id,
        _scrub_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    level: str | None = None,
    json_output: bool | None = None,
    force: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Repeated calls are no-ops unless ``force`` is set, so every app
    built in one process shares a single handler.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` or INFO.
        json_output: JSON lines when True, console rendering when False.
            Defaults to ``LOG_FORMAT`` (``json`` unless set otherwise).
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "json").lower() == "json"

    processors = build_processors()
    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    # httpx logs full upstream URLs (including search queries) at INFO.
    for name, lib_level in (
        ("httpx", logging.WARNING),
        ("httpcore", logging.WARNING),
        ("uvicorn.access", logging.WARNING),
        ("uvicorn.error", logging.INFO),
    ):
        logging.getLogger(name).setLevel(lib_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
