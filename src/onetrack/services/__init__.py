"""File removal and deletion-set commit services."""

from .file_service import FileService
from .deletion_service import DeletionService

__all__ = ["FileService", "DeletionService"]
