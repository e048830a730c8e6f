"""
Remote catalog enumeration.

Follows listing continuation tokens page by page and presents the result
as one lazy sequence of remote objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from azc.core.exceptions import CatalogError
from azc.core.logging import get_logger
from azc.core.models import Catalog, CatalogPage, RemoteObject
from azc.storage.base import StorageBackend

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True)
class ListOptions:
    """Listing options. The page size is a hint; the server may return fewer."""

    page_size: int = DEFAULT_PAGE_SIZE


class RemoteCatalog:
    """Enumerates every object in the backend's container."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    def list(self, options: ListOptions | None = None) -> Iterator[RemoteObject]:
        """Yield remote objects in page-arrival order.

        Each call starts a fresh pagination. Pages are fetched only as the
        consumer advances, so stopping early skips the remaining requests.

        Raises:
            CatalogError: If fetching any page fails. Objects already
                yielded remain with the caller.
        """
        options = options or ListOptions()
        token: str | None = None
        page_number = 0

        while True:
            page = self._fetch(token, options.page_size, page_number)
            page_number += 1
            logger.debug(
                "Fetched catalog page",
                page=page_number,
                items=len(page.items),
                has_more=page.has_more,
            )
            yield from page.items

            if not page.has_more:
                return
            token = page.continuation_token

    def snapshot(self, options: ListOptions | None = None) -> Catalog:
        """Pull the whole listing into a Catalog."""
        catalog = Catalog.from_iterable(self.list(options))
        logger.info("Listed container", objects=len(catalog), total_size=catalog.total_size)
        return catalog

    def _fetch(self, token: str | None, page_size: int, page_number: int) -> CatalogPage:
        try:
            return self.backend.list_page(token, page_size)
        except Exception as e:
            raise CatalogError(f"Listing page {page_number + 1} failed: {e}", cause=e) from e
