"""Repositories module for git-editor API.

Provides repository listing (partitioned by visibility) and creation.
"""
from .router import create_repo_router
from .schemas import CreateRepoRequest
from .service import RepoService

__all__ = [
    'create_repo_router',
    'CreateRepoRequest',
    'RepoService',
]
