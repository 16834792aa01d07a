"""Repository routes for git-editor API."""
from fastapi import APIRouter, Query, Request

from ...deps import AppContext
from .schemas import CreateRepoRequest
from .service import RepoService


def create_repo_router(ctx: AppContext) -> APIRouter:
    """Create repository router.

    Args:
        ctx: Shared app context

    Returns:
        Configured APIRouter with /repos endpoints
    """
    router = APIRouter(prefix='/repos', tags=['repos'])

    @router.get('')
    async def list_repos(
        request: Request,
        session_id: str | None = Query(default=None, alias='sessionId'),
        repo_type: str | None = Query(default=None, alias='type'),
    ):
        """List the user's repositories (all views unless type is given)."""
        session = await ctx.require_session(request, session_id)
        service = RepoService(ctx.client_for(session))
        return {'success': True, **await service.list_repositories(repo_type)}

    @router.post('')
    async def create_repo(request: Request, body: CreateRepoRequest):
        """Create a repository owned by the authenticated user."""
        session = await ctx.require_session(request, body.session_id)
        service = RepoService(ctx.client_for(session))
        result = await service.create_repository(
            body.name,
            description=body.description,
            private=body.is_private,
            auto_init=body.auto_init,
        )
        return {'success': True, **result}

    return router
