"""
azc - Azure Blobstore Client.

Lists, sends and gets files between a local directory and a blob
container, skipping downloads whose local copy already matches the
remote size.
"""

__version__ = "1.1.0"
__author__ = "azc Team"

from azc.core.config import AzcConfig, StorageSettings
from azc.sync.manager import SyncManager

__all__ = ["AzcConfig", "StorageSettings", "SyncManager", "__version__"]
