"""Pydantic schemas for git operations."""
from pydantic import Field

from ...schemas import CamelModel, NonEmptyStr, RepoRequest


class CommitFile(CamelModel):
    """One file change in a commit batch.

    Checked by the orchestrator, which reports the offending entry index.
    """
    path: str = ''
    operation: str = ''
    content: str | None = None
    sha: str | None = None


class CommitRequest(RepoRequest):
    """Request body for a batch commit."""
    message: str = ''
    files: list[CommitFile] = Field(default_factory=list)
    branch: str | None = None


class PullRequestCreate(RepoRequest):
    """Request body for opening a pull request. Forwarded verbatim."""
    title: NonEmptyStr
    head: NonEmptyStr
    base: NonEmptyStr
    body: str = ''
