"""
azc error taxonomy.

Setup and catalog errors abort a run. Transfer errors are local to one
item and are caught at the per-item loop of the sync manager.
"""

from __future__ import annotations


class AzcError(Exception):
    """Base class for all azc errors."""


class SetupError(AzcError):
    """Credentials, container, or proxy settings are missing or invalid."""


class CatalogError(AzcError):
    """Fetching a page of the remote listing failed."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class TransferError(AzcError):
    """A single upload or download failed."""

    def __init__(self, name: str, status: int | None = None, message: str = "") -> None:
        self.name = name
        self.status = status
        detail = message or "transfer failed"
        if status is not None:
            detail = f"{detail} (status {status})"
        self.detail = detail
        super().__init__(f"{name}: {detail}")


class UploadError(TransferError):
    """Uploading a local file failed."""


class DownloadError(TransferError):
    """Downloading a remote object failed."""


class PlanningInconsistency(AzcError, RuntimeError):
    """A requested name has no matching entry in the remote catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No remote object named {name!r} in the container listing")
