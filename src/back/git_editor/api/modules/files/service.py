"""File operations service for git-editor API."""
from pathlib import PurePosixPath
from typing import Any

from ...github_client import GitHubClient

# Extension -> editor language hint. Unknown extensions fall back to plaintext.
_LANGUAGE_BY_EXTENSION = {
    '.c': 'c',
    '.cpp': 'cpp',
    '.cs': 'csharp',
    '.css': 'css',
    '.go': 'go',
    '.h': 'c',
    '.html': 'html',
    '.java': 'java',
    '.js': 'javascript',
    '.json': 'json',
    '.jsx': 'javascript',
    '.kt': 'kotlin',
    '.md': 'markdown',
    '.php': 'php',
    '.py': 'python',
    '.rb': 'ruby',
    '.rs': 'rust',
    '.scss': 'scss',
    '.sh': 'shell',
    '.sql': 'sql',
    '.swift': 'swift',
    '.toml': 'toml',
    '.ts': 'typescript',
    '.tsx': 'typescript',
    '.xml': 'xml',
    '.yaml': 'yaml',
    '.yml': 'yaml',
}

_LANGUAGE_BY_NAME = {
    'Dockerfile': 'dockerfile',
    'Makefile': 'makefile',
}


def language_for_path(path: str) -> str:
    """Guess the editor language mode from a file path."""
    p = PurePosixPath(path)
    if p.name in _LANGUAGE_BY_NAME:
        return _LANGUAGE_BY_NAME[p.name]
    return _LANGUAGE_BY_EXTENSION.get(p.suffix.lower(), 'plaintext')


def _entry(item: dict[str, Any]) -> dict[str, Any]:
    return {
        'name': item.get('name'),
        'path': item.get('path'),
        'type': item.get('type'),
        'sha': item.get('sha'),
        'size': item.get('size', 0),
        'html_url': item.get('html_url'),
        'download_url': item.get('download_url'),
    }


def _write_summary(result: dict[str, Any]) -> dict[str, Any]:
    """Reshape a contents write response: new revision marker plus commit."""
    content = result.get('content') or {}
    commit = result.get('commit') or {}
    return {
        'path': content.get('path'),
        'sha': content.get('sha'),
        'commit': {
            'sha': commit.get('sha'),
            'message': commit.get('message'),
            'html_url': commit.get('html_url'),
        },
    }


class FileService:
    """Service class for repository file operations.

    The server keeps no record of what the browser has open; every call
    carries the repository, path and, for writes, the revision marker.
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    async def list_contents(
        self, owner: str, repo: str, path: str = '', ref: str | None = None,
    ) -> dict:
        """List a directory, directories first then by name.

        Returns:
            dict with entries list and path
        """
        data = await self.client.get_contents(owner, repo, path, ref)
        items = data if isinstance(data, list) else [data]
        entries = sorted(
            (_entry(item) for item in items),
            key=lambda e: (e['type'] != 'dir', (e['name'] or '').lower()),
        )
        return {'contents': entries, 'path': path}

    async def read_file(
        self, owner: str, repo: str, path: str, ref: str | None = None,
    ) -> dict:
        """Read a file as editor text.

        Returns:
            dict with the file handle: decoded content, revision marker
            (sha) and language hint
        """
        data = await self.client.get_file(owner, repo, path, ref)
        return {
            'file': {
                'name': data.get('name'),
                'path': data.get('path', path),
                'sha': data['sha'],
                'size': data.get('size', 0),
                'content': data['decoded_content'],
                'encoding': 'utf-8',
                'language': language_for_path(path),
                'html_url': data.get('html_url'),
            }
        }

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str | None = None,
    ) -> dict:
        result = await self.client.create_file(owner, repo, path, content, message, branch)
        return {'result': _write_summary(result)}

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> dict:
        result = await self.client.update_file(owner, repo, path, content, message, sha, branch)
        return {'result': _write_summary(result)}

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> dict:
        result = await self.client.delete_file(owner, repo, path, message, sha, branch)
        summary = _write_summary(result)
        summary['path'] = path
        return {'result': summary}

    async def search(self, owner: str, repo: str, query: str) -> dict:
        """Search code in one repository.

        Returns:
            dict with total count and slim result items
        """
        data = await self.client.search_code(owner, repo, query)
        items = [
            {
                'name': item.get('name'),
                'path': item.get('path'),
                'sha': item.get('sha'),
                'html_url': item.get('html_url'),
            }
            for item in data.get('items', [])
        ]
        return {
            'query': query,
            'total_count': data.get('total_count', len(items)),
            'incomplete_results': data.get('incomplete_results', False),
            'results': items,
        }
