"""FastAPI routers and utilities for the git-editor backend.

Example:
    # Simple usage with create_app()
    from git_editor.api import create_app
    app = create_app()

    # Custom configuration
    from git_editor.api import create_app, APIConfig
    config = APIConfig(github_api_url='https://ghe.example.com/api/v3')
    app = create_app(config)

    # Compose routers manually
    import httpx
    from fastapi import FastAPI
    from git_editor.api import (
        APIConfig, AppContext, InMemorySessionStore,
        create_auth_router, create_file_router,
    )
    ctx = AppContext(APIConfig(), InMemorySessionStore(), httpx.AsyncClient())
    app = FastAPI()
    app.include_router(create_auth_router(ctx), prefix='/api')
    app.include_router(create_file_router(ctx), prefix='/api')
"""

# Configuration
from .config import APIConfig, ConfigValidationError

# Sessions
from .sessions import InMemorySessionStore, Session, SessionStore, SessionSweeper, UserProfile

# Upstream client
from .github_client import GitHubClient

# Errors
from .errors import (
    ApiError,
    ErrorKind,
    PartialCommitFailure,
    SessionInvalid,
    UpstreamApiError,
    UpstreamAuthError,
    UpstreamConflictError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamTransportError,
    UpstreamValidationError,
    ValidationError,
)

# Router factories
from .deps import AppContext
from .modules.auth import create_auth_router
from .modules.branches import create_branch_router
from .modules.files import create_file_router
from .modules.git import CommitOrchestrator, create_git_router
from .modules.repos import create_repo_router

# Capabilities and registry
from .capabilities import RouterInfo, RouterRegistry, create_default_registry

# App factory
from .app import create_app

__all__ = [
    # Configuration
    'APIConfig',
    'ConfigValidationError',
    # Sessions
    'InMemorySessionStore',
    'Session',
    'SessionStore',
    'SessionSweeper',
    'UserProfile',
    # Upstream client
    'GitHubClient',
    # Errors
    'ApiError',
    'ErrorKind',
    'PartialCommitFailure',
    'SessionInvalid',
    'UpstreamApiError',
    'UpstreamAuthError',
    'UpstreamConflictError',
    'UpstreamNotFoundError',
    'UpstreamRateLimitError',
    'UpstreamTimeoutError',
    'UpstreamTransportError',
    'UpstreamValidationError',
    'ValidationError',
    # Routers
    'AppContext',
    'create_auth_router',
    'create_branch_router',
    'create_file_router',
    'create_git_router',
    'create_repo_router',
    'CommitOrchestrator',
    # Registry
    'RouterInfo',
    'RouterRegistry',
    'create_default_registry',
    # App factory
    'create_app',
]
