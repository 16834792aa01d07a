"""Pydantic schemas for file operations."""
from ...schemas import NonEmptyStr, RepoPath, RepoRequest


class FileRequest(RepoRequest):
    """Fields shared by all file mutations."""
    path: RepoPath
    message: NonEmptyStr
    branch: NonEmptyStr | None = None


class CreateFileRequest(FileRequest):
    """Request body for file creation. No revision marker."""
    content: str


class UpdateFileRequest(FileRequest):
    """Request body for file update, guarded by the current revision marker."""
    content: str
    sha: NonEmptyStr


class DeleteFileRequest(FileRequest):
    """Request body for file deletion."""
    sha: NonEmptyStr
