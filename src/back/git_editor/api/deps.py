"""Per-request plumbing shared by all routers.

``AppContext`` is built once by ``create_app()`` and handed to every
router factory. Handlers use it to resolve the caller's session and to
build an upstream client acting with that session's token.
"""
from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Request

from .config import APIConfig
from .errors import SessionInvalid
from .github_client import GitHubClient
from .sessions import Session, SessionStore

SESSION_HEADER = 'X-Session-ID'


@dataclass
class AppContext:
    """Dependencies shared by the proxy routers."""

    config: APIConfig
    session_store: SessionStore
    http_client: httpx.AsyncClient

    def client_for(self, session: Session) -> GitHubClient:
        """Upstream client acting with the session's access token."""
        return self.client_for_token(session.access_token)

    def client_for_token(self, token: str) -> GitHubClient:
        return GitHubClient(
            token,
            base_url=self.config.github_api_url,
            http_client=self.http_client,
            timeout_seconds=self.config.upstream_timeout_seconds,
            user_agent=self.config.user_agent,
        )

    async def require_session(self, request: Request, session_id: str | None) -> Session:
        """Resolve the caller's session or fail with SessionInvalid.

        The id comes from the query string or JSON body; the
        ``X-Session-ID`` header is accepted as a fallback.
        """
        session_id = session_id or request.headers.get(SESSION_HEADER)
        if not session_id:
            raise SessionInvalid(details='sessionId is required')
        session = await self.session_store.get(session_id)
        if session is None:
            raise SessionInvalid(details='Session not found or expired')
        return session
