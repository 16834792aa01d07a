"""Auth module for git-editor API.

Provides session lifecycle: login (token exchange), logout, validate.
"""
from .router import create_auth_router
from .schemas import LoginRequest, LogoutRequest

__all__ = [
    'create_auth_router',
    'LoginRequest',
    'LogoutRequest',
]
