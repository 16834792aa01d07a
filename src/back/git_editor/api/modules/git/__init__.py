"""Git module for git-editor API.

Provides status, history, batch commit and pull request operations.
"""
from .commit import CommitOrchestrator, CommitOutcome, FileOperation, validate_batch
from .router import create_git_router
from .service import GitService

__all__ = [
    'create_git_router',
    'CommitOrchestrator',
    'CommitOutcome',
    'FileOperation',
    'GitService',
    'validate_batch',
]
