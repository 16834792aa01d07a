"""Session lifecycle routes for git-editor API."""
from fastapi import APIRouter, Query, Request

from ....observability import get_logger
from ...deps import AppContext
from ...errors import SessionInvalid, UpstreamAuthError
from ...sessions import UserProfile
from .schemas import LoginRequest, LogoutRequest

logger = get_logger(__name__)


def create_auth_router(ctx: AppContext) -> APIRouter:
    """Create session lifecycle router.

    Args:
        ctx: Shared app context (session store, upstream client factory)

    Returns:
        Configured APIRouter with /auth endpoints
    """
    router = APIRouter(prefix='/auth', tags=['auth'])

    @router.post('/login')
    async def login(body: LoginRequest):
        """Exchange an access token for a session id.

        The token is checked against the upstream identity endpoint and
        then kept server-side; only the session id and the public
        profile go back to the browser.
        """
        client = ctx.client_for_token(body.token)
        try:
            profile = await client.get_user()
        except UpstreamAuthError as e:
            logger.info('login_rejected', upstream_status=e.status_code)
            raise SessionInvalid('Authentication failed', e.upstream_message)

        user = UserProfile.from_upstream(profile)
        session_id = await ctx.session_store.create(user, body.token)
        return {
            'success': True,
            'sessionId': session_id,
            'user': user.to_dict(),
        }

    @router.post('/logout')
    async def logout(body: LogoutRequest):
        """Destroy a session. Idempotent: unknown ids still succeed."""
        deleted = False
        if body.session_id:
            deleted = await ctx.session_store.delete(body.session_id)
        return {
            'success': True,
            'message': 'Logged out successfully',
            'deleted': deleted,
        }

    @router.get('/validate')
    async def validate(
        request: Request,
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """Check session liveness and return the cached profile."""
        session = await ctx.require_session(request, session_id)
        return {
            'success': True,
            'user': session.user.to_dict(),
            'session': {
                'createdAt': session.created_at.isoformat(),
                'lastAccessedAt': session.last_accessed_at.isoformat(),
            },
        }

    return router
