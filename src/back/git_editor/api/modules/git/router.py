"""Git routes for git-editor API.

Status, history, batch commit and pull requests.
"""
from fastapi import APIRouter, Query, Request

from ...deps import AppContext
from ...errors import PartialCommitFailure
from .commit import FileOperation
from .schemas import CommitRequest, PullRequestCreate
from .service import GitService


def create_git_router(ctx: AppContext) -> APIRouter:
    """Create git router.

    Args:
        ctx: Shared app context

    Returns:
        Configured APIRouter with /git endpoints
    """
    router = APIRouter(prefix='/git', tags=['git'])

    @router.get('/status')
    async def get_status(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        branch: str | None = None,
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """Ahead/behind summary of a branch against the default branch."""
        session = await ctx.require_session(request, session_id)
        service = GitService(ctx.client_for(session))
        return {'success': True, **await service.get_status(owner, repo, branch or None)}

    @router.get('/history')
    async def get_history(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        branch: str | None = None,
        path: str | None = None,
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """Recent commits of a branch, optionally limited to one path."""
        session = await ctx.require_session(request, session_id)
        service = GitService(ctx.client_for(session))
        result = await service.get_history(owner, repo, branch or None, path or None)
        return {'success': True, **result}

    @router.post('/commit')
    async def commit(request: Request, body: CommitRequest):
        """Commit a batch of file changes, one upstream commit per file.

        A batch that stops part-way answers 200 with success false and
        the per-file results, since earlier files are already committed.
        """
        session = await ctx.require_session(request, body.session_id)
        service = GitService(ctx.client_for(session))
        outcome = await service.commit(
            body.owner,
            body.repo,
            body.message,
            [FileOperation.from_dict(f.model_dump()) for f in body.files],
            body.branch,
        )
        failure = outcome.failure
        if failure is not None:
            raise PartialCommitFailure(
                outcome.summary(),
                failure.details or failure.error,
                payload=outcome.to_dict(),
            )
        return outcome.to_dict()

    @router.post('/pull-request')
    async def create_pull_request(request: Request, body: PullRequestCreate):
        """Open a pull request from head into base."""
        session = await ctx.require_session(request, body.session_id)
        service = GitService(ctx.client_for(session))
        result = await service.create_pull_request(
            body.owner, body.repo, body.title, body.head, body.base, body.body,
        )
        return {'success': True, **result}

    @router.get('/pull-requests')
    async def list_pull_requests(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        state: str = 'open',
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """List pull requests by state (open, closed or all)."""
        session = await ctx.require_session(request, session_id)
        service = GitService(ctx.client_for(session))
        return {'success': True, **await service.list_pull_requests(owner, repo, state)}

    return router
