"""Remote object-store backends."""

from .local import LocalRemoteStore
from .memory import MemoryRemoteStore
from .s3 import S3RemoteStore

__all__ = ["LocalRemoteStore", "MemoryRemoteStore", "S3RemoteStore"]
