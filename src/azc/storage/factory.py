"""Factory for creating storage backends from resolved settings."""

from __future__ import annotations

from azc.core.config import StorageSettings
from azc.core.exceptions import SetupError
from azc.core.logging import get_logger
from azc.storage.base import StorageBackend

logger = get_logger(__name__)


def create_backend(settings: StorageSettings, silent: bool = False) -> StorageBackend:
    """Create the Azure backend for *settings*.

    HTTP transaction logging is enabled unless running silently.

    Raises:
        SetupError: If the client cannot be constructed from the settings.
    """
    from azc.storage.azure import AzureBlobBackend

    try:
        backend = AzureBlobBackend(
            container_name=settings.container_name,
            account_name=settings.account_name,
            account_key=settings.account_key,
            proxy_url=settings.proxy_url,
            logging_enable=not silent,
        )
    except ValueError as e:
        raise SetupError(f"Cannot create client for container {settings.container_name!r}: {e}") from e

    logger.debug("Created backend", account_url=settings.account_url, container=settings.container_name)
    return backend
