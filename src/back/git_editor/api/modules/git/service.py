"""Git operations service for git-editor API."""
from typing import Any

from ...github_client import GitHubClient
from .commit import CommitOrchestrator, CommitOutcome, FileOperation


def _commit_summary(item: dict[str, Any]) -> dict[str, Any]:
    commit = item.get('commit') or {}
    author = commit.get('author') or {}
    return {
        'sha': item.get('sha'),
        'message': commit.get('message'),
        'author': {
            'name': author.get('name'),
            'email': author.get('email'),
            'login': (item.get('author') or {}).get('login'),
        },
        'date': author.get('date'),
        'html_url': item.get('html_url'),
    }


def _pull_summary(pr: dict[str, Any]) -> dict[str, Any]:
    return {
        'number': pr.get('number'),
        'title': pr.get('title'),
        'state': pr.get('state'),
        'body': pr.get('body'),
        'html_url': pr.get('html_url'),
        'head': (pr.get('head') or {}).get('ref'),
        'base': (pr.get('base') or {}).get('ref'),
        'user': (pr.get('user') or {}).get('login'),
        'created_at': pr.get('created_at'),
    }


class GitService:
    """Service class for status, history, commits and pull requests."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def get_status(self, owner: str, repo: str, branch: str | None = None) -> dict:
        """Compare a branch against the repository default branch.

        Returns:
            dict with currentBranch, defaultBranch, ahead, behind,
            hasChanges and lastCommit of the current branch
        """
        default_branch = await self.client.get_default_branch(owner, repo)
        current = branch or default_branch

        ahead = behind = 0
        if current != default_branch:
            comparison = await self.client.compare(owner, repo, default_branch, current)
            ahead = int(comparison.get('ahead_by', 0))
            behind = int(comparison.get('behind_by', 0))

        commits = await self.client.list_commits(owner, repo, branch=current, per_page=1)
        return {
            'currentBranch': current,
            'defaultBranch': default_branch,
            'ahead': ahead,
            'behind': behind,
            'hasChanges': bool(ahead or behind),
            'lastCommit': _commit_summary(commits[0]) if commits else None,
        }

    async def get_history(
        self,
        owner: str,
        repo: str,
        branch: str | None = None,
        path: str | None = None,
    ) -> dict:
        commits = await self.client.list_commits(owner, repo, branch=branch, path=path)
        return {'commits': [_commit_summary(c) for c in commits]}

    async def commit(
        self,
        owner: str,
        repo: str,
        message: str,
        files: list[FileOperation],
        branch: str | None = None,
    ) -> CommitOutcome:
        return await CommitOrchestrator(self.client).run(owner, repo, message, files, branch)

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str, body: str = '',
    ) -> dict:
        pr = await self.client.create_pull_request(owner, repo, title, head, base, body)
        return {'pullRequest': _pull_summary(pr)}

    async def list_pull_requests(self, owner: str, repo: str, state: str = 'open') -> dict:
        pulls = await self.client.list_pull_requests(owner, repo, state)
        return {'state': state, 'pullRequests': [_pull_summary(p) for p in pulls]}
