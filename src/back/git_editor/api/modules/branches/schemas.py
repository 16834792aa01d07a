"""Pydantic schemas for branch operations."""
import re
from typing import Annotated

from pydantic import AfterValidator, Field

from ...schemas import NonEmptyStr, RepoRequest

# Subset of git-check-ref-format rules that matter for names typed in the editor.
_INVALID_REF_CHARS = re.compile(r'[\s~^:?*\[\\]|\.\.|@\{')


def _check_branch_name(value: str) -> str:
    if _INVALID_REF_CHARS.search(value):
        raise ValueError(f'invalid branch name {value!r}')
    if value.startswith(('-', '/')) or value.endswith(('/', '.', '.lock')):
        raise ValueError(f'invalid branch name {value!r}')
    return value


BranchName = Annotated[NonEmptyStr, AfterValidator(_check_branch_name)]


class CreateBranchRequest(RepoRequest):
    """Request body for branch creation.

    Without ``sourceBranch`` the repository's default branch is used.
    """
    branch: BranchName
    source_branch: NonEmptyStr | None = Field(default=None, alias='sourceBranch')


class SwitchBranchRequest(RepoRequest):
    """Request body for switching the editor to another branch."""
    branch: NonEmptyStr
