"""Branches module for git-editor API.

Provides branch listing, creation from a source branch, and switching.
"""
from .router import create_branch_router
from .schemas import CreateBranchRequest, SwitchBranchRequest
from .service import BranchService

__all__ = [
    'create_branch_router',
    'CreateBranchRequest',
    'SwitchBranchRequest',
    'BranchService',
]
