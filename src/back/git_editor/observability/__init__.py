"""Logging, metrics and request correlation for git-editor.

``create_app()`` wires everything; the pieces are importable on their own
for scripts and tests::

    from git_editor.observability import configure_logging, get_logger, redact

    configure_logging(json_output=False)
    get_logger(__name__).info("login", session_id=redact(sid))
"""

from .logging import configure_logging, get_logger, redact, request_id_ctx
from .metrics import metrics_text

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics_text",
    "redact",
    "request_id_ctx",
]
