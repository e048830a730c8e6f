"""
azc Core - configuration, logging, data models and errors.

Shared by the storage backends, the sync engine and the CLI.
"""

from azc.core.config import AzcConfig, StorageSettings, load_config, load_settings
from azc.core.exceptions import (
    AzcError,
    CatalogError,
    DownloadError,
    PlanningInconsistency,
    SetupError,
    TransferError,
    UploadError,
)
from azc.core.logging import get_logger, setup_logging
from azc.core.models import (
    Catalog,
    CatalogPage,
    LocalFile,
    RemoteObject,
    SyncAction,
    SyncDecision,
)

__all__ = [
    "AzcConfig",
    "StorageSettings",
    "load_config",
    "load_settings",
    "AzcError",
    "CatalogError",
    "DownloadError",
    "PlanningInconsistency",
    "SetupError",
    "TransferError",
    "UploadError",
    "get_logger",
    "setup_logging",
    "Catalog",
    "CatalogPage",
    "LocalFile",
    "RemoteObject",
    "SyncAction",
    "SyncDecision",
]
