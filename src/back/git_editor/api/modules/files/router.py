"""File routes for git-editor API."""
from fastapi import APIRouter, Query, Request

from ...deps import AppContext
from ...errors import ValidationError
from ...schemas import normalize_repo_path
from .schemas import CreateFileRequest, DeleteFileRequest, UpdateFileRequest
from .service import FileService


def _file_path(path: str) -> str:
    try:
        return normalize_repo_path(path)
    except ValueError as e:
        raise ValidationError('Invalid file path', str(e))


def create_file_router(ctx: AppContext) -> APIRouter:
    """Create file router.

    Args:
        ctx: Shared app context

    Returns:
        Configured APIRouter with /files endpoints
    """
    router = APIRouter(prefix='/files', tags=['files'])

    @router.get('/contents')
    async def list_contents(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        path: str = '',
        branch: str | None = None,
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """List a directory (repository root when path is empty)."""
        session = await ctx.require_session(request, session_id)
        service = FileService(ctx.client_for(session))
        directory = _file_path(path) if path.strip('/') else ''
        result = await service.list_contents(owner, repo, directory, branch or None)
        return {'success': True, **result}

    @router.get('/file')
    async def read_file(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        path: str = Query(..., min_length=1),
        branch: str | None = None,
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """Read a file as text together with its revision marker."""
        session = await ctx.require_session(request, session_id)
        service = FileService(ctx.client_for(session))
        result = await service.read_file(owner, repo, _file_path(path), branch or None)
        return {'success': True, **result}

    @router.post('/file')
    async def create_file(request: Request, body: CreateFileRequest):
        """Create a new file; fails upstream if the path already exists."""
        session = await ctx.require_session(request, body.session_id)
        service = FileService(ctx.client_for(session))
        result = await service.create_file(
            body.owner, body.repo, body.path, body.content, body.message, body.branch,
        )
        return {'success': True, **result}

    @router.put('/file')
    async def update_file(request: Request, body: UpdateFileRequest):
        """Overwrite a file. sha must be the revision the edit was based on."""
        session = await ctx.require_session(request, body.session_id)
        service = FileService(ctx.client_for(session))
        result = await service.update_file(
            body.owner, body.repo, body.path, body.content, body.message,
            body.sha, body.branch,
        )
        return {'success': True, **result}

    @router.delete('/file')
    async def delete_file(request: Request, body: DeleteFileRequest):
        """Delete a file at its current revision."""
        session = await ctx.require_session(request, body.session_id)
        service = FileService(ctx.client_for(session))
        result = await service.delete_file(
            body.owner, body.repo, body.path, body.message, body.sha, body.branch,
        )
        return {'success': True, **result}

    @router.get('/search')
    async def search_files(
        request: Request,
        owner: str = Query(..., min_length=1),
        repo: str = Query(..., min_length=1),
        query: str = Query(..., min_length=1),
        session_id: str | None = Query(default=None, alias='sessionId'),
    ):
        """Search code in the repository."""
        session = await ctx.require_session(request, session_id)
        service = FileService(ctx.client_for(session))
        return {'success': True, **await service.search(owner, repo, query.strip())}

    return router
