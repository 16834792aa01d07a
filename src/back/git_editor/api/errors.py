"""Error taxonomy for the git-editor proxy API.

Every failure the API reports belongs to one closed set of kinds
(``ErrorKind``). Each kind is an exception class that knows its HTTP
status and its stable machine-readable ``code``; the boundary turns it
into the JSON envelope::

    {"success": false, "error": "...", "details": "...", "code": "..."}

Upstream failures keep the provider's status and message so a developer
can see what the hosting API actually said.
"""
from __future__ import annotations

import time
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ..observability import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    """Closed set of failure classes surfaced by the API."""

    VALIDATION = 'validation_error'
    SESSION_INVALID = 'session_invalid'
    UPSTREAM = 'upstream_error'
    PARTIAL_COMMIT = 'partial_commit_failure'
    INTERNAL = 'internal_error'


class ApiError(Exception):
    """Base class for every error the API reports to the browser."""

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = 'internal_error'
    http_status: int = 500

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def headers(self) -> dict[str, str]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the error envelope."""
        body: dict[str, Any] = {
            'success': False,
            'error': self.message,
            'code': self.code,
        }
        if self.details:
            body['details'] = self.details
        return body


class ValidationError(ApiError):
    """Missing or malformed request parameter. Never retried."""

    kind = ErrorKind.VALIDATION
    code = 'invalid_request'
    http_status = 400


class SessionInvalid(ApiError):
    """Unknown or expired session id.

    The browser is expected to discard its stored session id and
    prompt for credentials again.
    """

    kind = ErrorKind.SESSION_INVALID
    code = 'session_invalid'
    http_status = 401

    def __init__(self, message: str = 'Invalid session', details: str | None = None):
        super().__init__(message, details)


class UpstreamApiError(ApiError):
    """The hosting provider rejected or failed a call.

    Attributes:
        status_code: HTTP status returned by the provider (0 when no
            response was received)
        upstream_message: The provider's own error message
        documentation_url: Provider documentation link, when supplied
    """

    kind = ErrorKind.UPSTREAM
    code = 'upstream_error'
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        upstream_message: str | None = None,
        documentation_url: str | None = None,
    ):
        super().__init__(message, upstream_message)
        self.status_code = status_code
        self.upstream_message = upstream_message
        self.documentation_url = documentation_url

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.status_code:
            body['upstream_status'] = self.status_code
        return body


class UpstreamAuthError(UpstreamApiError):
    """401/403 from the provider: bad, expired or under-scoped credential."""

    code = 'upstream_auth_failed'

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return 401 if self.status_code == 401 else 403


class UpstreamNotFoundError(UpstreamApiError):
    """404: repository, path, branch or ref does not exist (or is hidden)."""

    code = 'upstream_not_found'
    http_status = 404


class UpstreamConflictError(UpstreamApiError):
    """409: typically a stale revision marker on a contents write."""

    code = 'upstream_conflict'
    http_status = 409


class UpstreamValidationError(UpstreamApiError):
    """422: the provider refused the request body."""

    code = 'upstream_unprocessable'
    http_status = 422


class UpstreamRateLimitError(UpstreamApiError):
    """Provider rate limit exhausted.

    ``reset_at`` is the epoch second at which the quota refills, when the
    provider reported it.
    """

    code = 'upstream_rate_limited'
    http_status = 429

    def __init__(self, message: str, *, reset_at: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.reset_at = reset_at

    def headers(self) -> dict[str, str]:
        if self.reset_at is None:
            return {}
        return {'Retry-After': str(max(0, self.reset_at - int(time.time())))}

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.reset_at is not None:
            body['rate_limit_reset'] = self.reset_at
        return body


class UpstreamTimeoutError(UpstreamApiError):
    """No upstream response within the configured timeout."""

    code = 'upstream_timeout'
    http_status = 504


class UpstreamTransportError(UpstreamApiError):
    """Connection-level failure talking to the provider."""

    code = 'upstream_unreachable'
    http_status = 502


class PartialCommitFailure(ApiError):
    """A commit batch stopped part-way.

    Reported as HTTP 200 with ``success: false`` so the browser can
    reconcile which files actually changed upstream. ``payload`` carries
    the per-operation results.
    """

    kind = ErrorKind.PARTIAL_COMMIT
    code = 'partial_commit_failure'
    http_status = 200

    def __init__(self, message: str, details: str | None = None, *, payload: dict[str, Any]):
        super().__init__(message, details)
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        return {**self.payload, **super().to_dict()}


def error_response(exc: ApiError) -> JSONResponse:
    """Build the JSON envelope response for an ApiError."""
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=exc.headers() or None,
    )


def _summarize_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get('loc', ()) if p not in ('body', 'query', 'header')]
        field_name = '.'.join(loc) or 'request'
        parts.append(f"{field_name}: {err.get('msg', 'invalid')}")
    return '; '.join(parts)


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """Last-resort failure boundary.

    Anything that escapes the routers and the registered exception
    handlers becomes a generic 500 envelope; the traceback is logged
    server-side only.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                'unhandled_exception',
                method=request.method,
                path=request.url.path,
                error_type=type(exc).__name__,
            )
            return JSONResponse(
                status_code=500,
                content={
                    'success': False,
                    'error': 'Internal server error',
                    'code': ErrorKind.INTERNAL.value,
                },
            )


def install_error_handlers(app: FastAPI) -> None:
    """Register envelope-producing handlers for every known error kind."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        log = logger.warning if exc.http_status >= 500 else logger.info
        log(
            'request_failed',
            path=request.url.path,
            kind=exc.kind.value,
            code=exc.code,
            status=exc.http_status,
            error=exc.message,
        )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return error_response(
            ValidationError('Invalid request parameters', _summarize_validation_errors(exc))
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                'success': False,
                'error': str(exc.detail),
                'code': f'http_{exc.status_code}',
            },
            headers=getattr(exc, 'headers', None),
        )

    app.add_middleware(ErrorBoundaryMiddleware)
