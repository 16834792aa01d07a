"""Shared pydantic building blocks for request schemas.

Browser payloads use camelCase (``sessionId``, ``sourceBranch``); models
expose snake_case attributes through aliases and accept either form.
"""
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def normalize_repo_path(value: str) -> str:
    path = value.strip().strip('/')
    if not path:
        raise ValueError('path must not be empty')
    if any(part in ('', '.', '..') for part in path.split('/')):
        raise ValueError(f'invalid path segment in {value!r}')
    return path


RepoPath = Annotated[str, AfterValidator(normalize_repo_path)]


class CamelModel(BaseModel):
    """Base model accepting both alias and field names."""

    model_config = ConfigDict(populate_by_name=True)


class SessionRequest(CamelModel):
    """Any request body carrying a session id."""

    session_id: str | None = Field(default=None, alias='sessionId')


class RepoRequest(SessionRequest):
    """Request body addressing one repository."""

    owner: NonEmptyStr
    repo: NonEmptyStr
