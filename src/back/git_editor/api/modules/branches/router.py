"""Branch routes for git-editor API."""
from fastapi import APIRouter, Query, Request

from ...deps import AppContext
from .schemas import CreateBranchRequest, SwitchBranchRequest
from .service import BranchService


def create_branch_router(ctx: AppContext) -> APIRouter:
    """Create branch router.

    Args:
        ctx: Shared app context

    Returns:
        Configured APIRouter with /branches endpoints
    """
    router = APIRouter(prefix='/branches', tags=['branches'])

    @router.get('')
    async def list_branches(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """List branches of a repository."""
        session = await ctx.require_session(request, session_id)
        service = BranchService(ctx.client_for(session))
        return {'success': True, **await service.list_branches(owner, repo)}

    @router.post('')
    async def create_branch(request: Request, body: CreateBranchRequest):
        """Create a branch from sourceBranch (default: repository default branch)."""
        session = await ctx.require_session(request, body.session_id)
        service = BranchService(ctx.client_for(session))
        result = await service.create_branch(
            body.owner, body.repo, body.branch, body.source_branch,
        )
        return {'success': True, **result}

    @router.post('/switch')
    async def switch_branch(request: Request, body: SwitchBranchRequest):
        """Look up the branch the editor is switching to."""
        session = await ctx.require_session(request, body.session_id)
        service = BranchService(ctx.client_for(session))
        return {'success': True, **await service.switch_branch(body.owner, body.repo, body.branch)}

    return router
