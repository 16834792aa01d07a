"""Branch operations service for git-editor API."""
from ...github_client import GitHubClient


class BranchService:
    """Service class for branch operations."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def list_branches(self, owner: str, repo: str) -> dict:
        branches = await self.client.list_branches(owner, repo)
        return {'branches': branches}

    async def create_branch(
        self,
        owner: str,
        repo: str,
        branch: str,
        source_branch: str | None = None,
    ) -> dict:
        """Create a branch at the current head of source_branch.

        Args:
            source_branch: Branch to fork from. Defaults to the
                repository's default branch as reported upstream.

        Returns:
            dict with the created ref, source branch and head sha
        """
        source = source_branch or await self.client.get_default_branch(owner, repo)
        ref = await self.client.create_branch(owner, repo, branch, source)
        return {
            'branch': ref,
            'name': branch,
            'sourceBranch': source,
            'sha': ref['object']['sha'],
        }

    async def switch_branch(self, owner: str, repo: str, branch: str) -> dict:
        """Confirm a branch exists and return its head information."""
        info = await self.client.get_branch(owner, repo, branch)
        return {'branch': info}
