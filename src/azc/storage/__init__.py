"""
azc storage module.

Abstract storage backend plus the Azure Blob Storage implementation.
"""

from azc.storage.base import RangeDownload, StorageBackend
from azc.storage.factory import create_backend

__all__ = ["RangeDownload", "StorageBackend", "create_backend"]
