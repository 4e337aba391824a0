"""
onetrack: duplicate track remover and name tidier for music folders.

Core features:
- Concurrent SHA-256 content hashing, one survivor kept per set of identical tracks
- Canonical, filesystem-safe file and folder names
- Empty folder pruning
- Safe deletion to system trash (via send2trash), only after confirmation
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("onetrack")
except Exception:
    __version__ = "0.0.0+unknown"

# Public API, only what users should import directly
from onetrack.commands import CleanupCommand
from onetrack.core import ProcessingParams, RunContext, RunReport, DuplicateGroup, DeletionResult
from onetrack.utils.convert_utils import ConvertUtils
from onetrack.services import DeletionService
from onetrack.services.file_service import FileService

__all__ = [
    "CleanupCommand",
    "ProcessingParams",
    "RunContext",
    "RunReport",
    "DuplicateGroup",
    "DeletionResult",
    "ConvertUtils",
    "DeletionService",
    "FileService",
    "__version__",
]
