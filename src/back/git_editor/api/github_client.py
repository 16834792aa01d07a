"""Async client for the GitHub REST API (v3).

This is the single point of upstream HTTP interaction for the proxy
handlers. It owns request construction (auth header, base64 content
encoding and decoding), response normalization, and error wrapping:
every method either returns decoded JSON or raises an
``UpstreamApiError`` subclass. No raw httpx exception escapes.

One-shot calls only: no retries, no caching, no rate-limit backoff.
"""

from __future__ import annotations

import base64
import binascii
import time
from typing import Any
from urllib.parse import quote

import httpx

from ..observability import get_logger
from ..observability.metrics import (
    UPSTREAM_REQUEST_DURATION_SECONDS,
    UPSTREAM_REQUESTS_TOTAL,
)
from .errors import (
    UpstreamApiError,
    UpstreamAuthError,
    UpstreamConflictError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamTransportError,
    UpstreamValidationError,
    ValidationError,
)

logger = get_logger(__name__)

DEFAULT_BASE_URL = 'https://api.github.com'
ACCEPT_HEADER = 'application/vnd.github.v3+json'

REPOS_PAGE_SIZE = 100
BRANCHES_PAGE_SIZE = 100
COMMITS_PAGE_SIZE = 50
PULLS_PAGE_SIZE = 20
SEARCH_PAGE_SIZE = 30

REPO_VISIBILITIES = ('all', 'public', 'private')
PULL_STATES = ('open', 'closed', 'all')


def encode_content(text: str) -> str:
    """Encode editor text as base64 UTF-8 for the contents API."""
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def decode_content(encoded: str) -> str:
    """Decode a contents API payload into text.

    The provider wraps base64 at 60 columns; the embedded newlines are
    discarded by the decoder.

    Raises:
        ValidationError: If the payload is not base64 or not UTF-8 text
    """
    try:
        raw = base64.b64decode(encoded or '')
    except (binascii.Error, ValueError) as e:
        raise ValidationError('File content is not valid base64', str(e))
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        raise ValidationError(
            'File is not valid UTF-8 text',
            'Binary files cannot be opened in the editor',
        )


_DOT_SEGMENTS = ('.', '..')


def _q(segment: str) -> str:
    """Quote a single URL path segment (owner, repo, branch name).

    Raises:
        ValidationError: If the segment is empty or a dot segment
    """
    if not segment or segment in _DOT_SEGMENTS:
        raise ValidationError(f'Invalid path segment: {segment!r}')
    return quote(segment, safe='')


def _qpath(path: str) -> str:
    """Quote a repository file path, keeping directory separators.

    The empty path (repository root) is allowed; empty and dot segments
    inside a path are not, since the URL would leave the contents API.

    Raises:
        ValidationError: On an empty or dot segment
    """
    path = path.strip('/')
    if path and any(not part or part in _DOT_SEGMENTS for part in path.split('/')):
        raise ValidationError(f'Invalid repository path: {path!r}')
    return quote(path, safe='/')


class GitHubClient:
    """Minimal async GitHub REST client bound to one access token.

    Args:
        token: Access token of the session this client acts for
        base_url: API root (GitHub Enterprise or a test double)
        http_client: Shared httpx.AsyncClient. When omitted the client
            creates its own and closes it in ``aclose()``.
        timeout_seconds: Bound applied to every single call
        user_agent: Value for the mandatory User-Agent header
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        user_agent: str = 'git-editor',
    ) -> None:
        if not token:
            raise ValueError('token is required')

        self._token = token
        self._base_url = base_url.rstrip('/')
        self._timeout_seconds = float(timeout_seconds)
        self._user_agent = user_agent
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    def __repr__(self) -> str:
        return f'GitHubClient(base_url={self._base_url!r})'

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        # Never log these headers.
        return {
            'Authorization': f'token {self._token}',
            'Accept': ACCEPT_HEADER,
            'User-Agent': self._user_agent,
        }

    def _raise_for_error(self, resp: httpx.Response, action: str) -> None:
        if resp.status_code < 400:
            return

        upstream_message = resp.text or resp.reason_phrase
        documentation_url = None
        try:
            payload = resp.json()
            if isinstance(payload, dict):
                upstream_message = payload.get('message') or upstream_message
                documentation_url = payload.get('documentation_url')
                field_errors = [
                    e.get('message') or f"{e.get('field')} {e.get('code')}"
                    for e in payload.get('errors') or []
                    if isinstance(e, dict)
                ]
                if field_errors:
                    upstream_message = f"{upstream_message} ({'; '.join(field_errors)})"
        except ValueError:
            pass

        kwargs = {
            'status_code': resp.status_code,
            'upstream_message': upstream_message,
            'documentation_url': documentation_url,
        }
        message = f'Failed to {action}'

        remaining = resp.headers.get('x-ratelimit-remaining')
        if resp.status_code == 429 or (resp.status_code == 403 and remaining == '0'):
            reset = resp.headers.get('x-ratelimit-reset', '')
            raise UpstreamRateLimitError(
                f'{message}: upstream rate limit exceeded',
                reset_at=int(reset) if reset.isdigit() else None,
                **kwargs,
            )

        err_cls: type[UpstreamApiError]
        if resp.status_code in (401, 403):
            err_cls = UpstreamAuthError
        elif resp.status_code == 404:
            err_cls = UpstreamNotFoundError
        elif resp.status_code == 409:
            err_cls = UpstreamConflictError
        elif resp.status_code == 422:
            err_cls = UpstreamValidationError
        else:
            err_cls = UpstreamApiError

        raise err_cls(message, **kwargs)

    async def _request(
        self,
        operation: str,
        action: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one upstream call and return its decoded JSON body.

        Args:
            operation: Metric/log label (client method name)
            action: Human phrase for error messages ("update file")
            method: HTTP method
            path: Path below the API root, already quoted
        """
        url = f'{self._base_url}{path}'
        start = time.perf_counter()
        status = 'error'
        try:
            resp = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self._timeout_seconds,
            )
            status = str(resp.status_code)
        except httpx.TimeoutException as exc:
            status = 'timeout'
            raise UpstreamTimeoutError(
                f'Failed to {action}: upstream timed out',
                upstream_message=f'No response within {self._timeout_seconds:g}s',
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamTransportError(
                f'Failed to {action}: upstream unreachable',
                upstream_message=str(exc) or type(exc).__name__,
            ) from exc
        finally:
            elapsed = time.perf_counter() - start
            UPSTREAM_REQUESTS_TOTAL.labels(operation=operation, status=status).inc()
            UPSTREAM_REQUEST_DURATION_SECONDS.labels(operation=operation).observe(elapsed)
            logger.debug(
                'upstream_call',
                operation=operation,
                method=method,
                path=path,
                status=status,
                duration_ms=round(elapsed * 1000, 2),
            )

        self._raise_for_error(resp, action)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ── Identity ─────────────────────────────────────────────────────

    async def get_user(self) -> dict[str, Any]:
        """Return the profile of the token's owner."""
        return await self._request('get_user', 'get user', 'GET', '/user')

    # ── Repositories ─────────────────────────────────────────────────

    async def list_repos(self, visibility: str = 'all') -> list[dict[str, Any]]:
        """List repositories of the authenticated user, most recently updated first."""
        if visibility not in REPO_VISIBILITIES:
            raise ValidationError(
                f"Invalid repository type '{visibility}'",
                f"Must be one of: {', '.join(REPO_VISIBILITIES)}",
            )
        return await self._request(
            'list_repos', 'get repositories', 'GET', '/user/repos',
            params={
                'type': visibility,
                'sort': 'updated',
                'direction': 'desc',
                'per_page': REPOS_PAGE_SIZE,
            },
        )

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._request(
            'get_repo', 'get repository', 'GET', f'/repos/{_q(owner)}/{_q(repo)}',
        )

    async def get_default_branch(self, owner: str, repo: str) -> str:
        """Resolve the repository's default branch from its metadata."""
        info = await self.get_repo(owner, repo)
        return info['default_branch']

    async def create_repo(
        self,
        name: str,
        description: str = '',
        private: bool = False,
        auto_init: bool = True,
    ) -> dict[str, Any]:
        return await self._request(
            'create_repo', 'create repository', 'POST', '/user/repos',
            json={
                'name': name,
                'description': description,
                'private': private,
                'auto_init': auto_init,
            },
        )

    # ── Contents ─────────────────────────────────────────────────────

    def _contents_path(self, owner: str, repo: str, path: str) -> str:
        return f'/repos/{_q(owner)}/{_q(repo)}/contents/{_qpath(path)}'

    async def get_contents(
        self, owner: str, repo: str, path: str = '', ref: str | None = None,
    ) -> list[dict[str, Any]] | dict[str, Any]:
        """Directory listing (list) or single entry (dict) at path and ref."""
        return await self._request(
            'get_contents', 'get contents', 'GET',
            self._contents_path(owner, repo, path),
            params={'ref': ref} if ref else None,
        )

    async def get_file(
        self, owner: str, repo: str, path: str, ref: str | None = None,
    ) -> dict[str, Any]:
        """Fetch a file and decode its content.

        Returns the upstream entry plus ``decoded_content`` (text).

        Raises:
            ValidationError: If the path is a directory, not a regular
                file, too large for inline content, or not UTF-8 text
        """
        data = await self._request(
            'get_file', 'get file content', 'GET',
            self._contents_path(owner, repo, path),
            params={'ref': ref} if ref else None,
        )
        if isinstance(data, list):
            raise ValidationError(f'Path is a directory: {path}')
        if data.get('type', 'file') != 'file':
            raise ValidationError(f"Path is not a regular file: {path} ({data.get('type')})")
        if data.get('encoding') == 'none':
            raise ValidationError(
                f'File is too large to open: {path}',
                f"{data.get('size', 0)} bytes exceeds the inline content limit",
            )
        return {**data, 'decoded_content': decode_content(data.get('content', ''))}

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        """Create a new file. A revision marker is never sent."""
        body: dict[str, Any] = {'message': message, 'content': encode_content(content)}
        if branch:
            body['branch'] = branch
        return await self._request(
            'create_file', 'create file', 'PUT',
            self._contents_path(owner, repo, path), json=body,
        )

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        """Overwrite an existing file guarded by its current revision marker."""
        body: dict[str, Any] = {
            'message': message,
            'content': encode_content(content),
            'sha': sha,
        }
        if branch:
            body['branch'] = branch
        return await self._request(
            'update_file', 'update file', 'PUT',
            self._contents_path(owner, repo, path), json=body,
        )

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {'message': message, 'sha': sha}
        if branch:
            body['branch'] = branch
        return await self._request(
            'delete_file', 'delete file', 'DELETE',
            self._contents_path(owner, repo, path), json=body,
        )

    # ── Branches and refs ────────────────────────────────────────────

    async def list_branches(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return await self._request(
            'list_branches', 'get branches', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/branches',
            params={'per_page': BRANCHES_PAGE_SIZE},
        )

    async def get_branch(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return await self._request(
            'get_branch', 'get branch', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/branches/{_q(branch)}',
        )

    async def get_ref_sha(self, owner: str, repo: str, branch: str) -> str:
        """Head commit SHA of a branch."""
        ref = await self._request(
            'get_ref', 'get branch ref', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/git/ref/heads/{_qpath(branch)}',
        )
        return ref['object']['sha']

    async def create_branch(
        self, owner: str, repo: str, branch: str, source_branch: str,
    ) -> dict[str, Any]:
        """Create ``branch`` pointing at the current head of ``source_branch``.

        Two upstream calls: read the source head SHA, then create the ref.
        """
        sha = await self.get_ref_sha(owner, repo, source_branch)
        return await self._request(
            'create_ref', 'create branch', 'POST',
            f'/repos/{_q(owner)}/{_q(repo)}/git/refs',
            json={'ref': f'refs/heads/{branch}', 'sha': sha},
        )

    # ── History ──────────────────────────────────────────────────────

    async def list_commits(
        self,
        owner: str,
        repo: str,
        branch: str | None = None,
        path: str | None = None,
        per_page: int = COMMITS_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """Commit log; without ``branch`` the upstream default branch is used."""
        params: dict[str, Any] = {'per_page': per_page}
        if branch:
            params['sha'] = branch
        if path:
            params['path'] = path
        return await self._request(
            'list_commits', 'get commit history', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/commits', params=params,
        )

    async def compare(self, owner: str, repo: str, base: str, head: str) -> dict[str, Any]:
        """Compare two refs (``ahead_by``/``behind_by`` are relative to base)."""
        return await self._request(
            'compare', 'compare branches', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/compare/{_q(base)}...{_q(head)}',
        )

    # ── Pull requests ────────────────────────────────────────────────

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str = '',
    ) -> dict[str, Any]:
        return await self._request(
            'create_pull', 'create pull request', 'POST',
            f'/repos/{_q(owner)}/{_q(repo)}/pulls',
            json={'title': title, 'body': body, 'head': head, 'base': base},
        )

    async def list_pull_requests(
        self, owner: str, repo: str, state: str = 'open',
    ) -> list[dict[str, Any]]:
        if state not in PULL_STATES:
            raise ValidationError(
                f"Invalid pull request state '{state}'",
                f"Must be one of: {', '.join(PULL_STATES)}",
            )
        return await self._request(
            'list_pulls', 'get pull requests', 'GET',
            f'/repos/{_q(owner)}/{_q(repo)}/pulls',
            params={'state': state, 'per_page': PULLS_PAGE_SIZE},
        )

    # ── Search ───────────────────────────────────────────────────────

    async def search_code(self, owner: str, repo: str, query: str) -> dict[str, Any]:
        """Code search scoped to one repository via the ``repo:`` qualifier."""
        return await self._request(
            'search_code', 'search code', 'GET', '/search/code',
            params={'q': f'{query} repo:{owner}/{repo}', 'per_page': SEARCH_PAGE_SIZE},
        )
