"""Files module for git-editor API.

Provides repository file operations: list, read, create, update, delete, search.
"""
from .router import create_file_router
from .schemas import CreateFileRequest, DeleteFileRequest, UpdateFileRequest
from .service import FileService, language_for_path

__all__ = [
    'create_file_router',
    'CreateFileRequest',
    'DeleteFileRequest',
    'UpdateFileRequest',
    'FileService',
    'language_for_path',
]
