"""Pydantic schemas for repository operations."""
from pydantic import Field

from ...schemas import NonEmptyStr, SessionRequest


class CreateRepoRequest(SessionRequest):
    """Request body for repository creation."""
    name: NonEmptyStr
    description: str = ''
    is_private: bool = Field(default=False, alias='isPrivate')
    auto_init: bool = Field(default=True, alias='autoInit')
