"""Repository operations service for git-editor API."""
from typing import Any

from ...errors import ValidationError
from ...github_client import REPO_VISIBILITIES, GitHubClient


class RepoService:
    """Service class for repository listing and creation.

    Listing fetches the user's repositories once and partitions them
    locally by the upstream ``private`` flag, so every view is taken from
    the same snapshot.
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    @staticmethod
    def partition(repos: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
        """Split a repository list into public/private/all views."""
        return {
            'public': [r for r in repos if not r.get('private')],
            'private': [r for r in repos if r.get('private')],
            'all': list(repos),
        }

    async def list_repositories(self, repo_type: str | None = None) -> dict:
        """List repositories.

        Args:
            repo_type: 'public', 'private' or 'all'. When omitted all three
                views are returned so the browser can switch tabs without
                another request.

        Returns:
            dict with 'public', 'private' and 'all' lists, or with 'type'
            and 'repos' when a single view was requested
        """
        if repo_type is not None and repo_type not in REPO_VISIBILITIES:
            raise ValidationError(
                f"Invalid repository type '{repo_type}'",
                f"Must be one of: {', '.join(REPO_VISIBILITIES)}",
            )

        views = self.partition(await self.client.list_repos('all'))
        if repo_type is None:
            return views
        return {'type': repo_type, 'repos': views[repo_type]}

    async def create_repository(
        self,
        name: str,
        description: str = '',
        private: bool = False,
        auto_init: bool = True,
    ) -> dict:
        repo = await self.client.create_repo(name, description, private, auto_init)
        return {'repo': repo}
