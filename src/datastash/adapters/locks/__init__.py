"""File-backed lock providers."""

from .file_lock import FileLockProvider

__all__ = ["FileLockProvider"]
