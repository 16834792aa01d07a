"""Health and metrics routes.

Mounted at the application root, outside the API prefix, and present
whatever feature routers are enabled.
"""

from fastapi import APIRouter
from starlette.responses import Response

from ..observability.metrics import metrics_text
from .deps import AppContext


def create_utility_router(ctx: AppContext, features: dict[str, bool] | None = None) -> APIRouter:
    router = APIRouter(tags=['utility'])

    @router.get('/health')
    async def health():
        """Liveness. Reports local state only and never calls upstream."""
        status = {
            'status': 'ok',
            'upstream': ctx.config.github_api_url,
            'sessions': await ctx.session_store.count(),
        }
        if features is not None:
            status['features'] = features
        return status

    @router.get('/metrics')
    async def metrics():
        body, content_type = metrics_text()
        return Response(content=body, media_type=content_type)

    return router
