"""Pydantic schemas for session lifecycle."""
from pydantic import AliasChoices, Field

from ...schemas import CamelModel, NonEmptyStr, SessionRequest


class LoginRequest(CamelModel):
    """Request body for exchanging an access token for a session.

    ``githubToken`` is accepted as well for older browser clients.
    """
    token: NonEmptyStr = Field(validation_alias=AliasChoices('token', 'githubToken'))


class LogoutRequest(SessionRequest):
    """Request body for destroying a session."""
