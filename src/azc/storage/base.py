"""Storage backend abstraction used by the sync engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

from azc.core.models import CatalogPage

STATUS_OK = 200
STATUS_CREATED = 201
STATUS_PARTIAL_CONTENT = 206
STATUS_RANGE_NOT_SATISFIABLE = 416

DOWNLOAD_SUCCESS = frozenset({STATUS_OK, STATUS_PARTIAL_CONTENT})


@dataclass
class RangeDownload:
    """Response to a ranged read: the status and a stream of body chunks."""

    status: int
    chunks: Iterator[bytes]

    @property
    def ok(self) -> bool:
        return self.status in DOWNLOAD_SUCCESS


class StorageBackend(ABC):
    """List, upload and download objects in one container by name."""

    @abstractmethod
    def list_page(self, continuation_token: str | None, max_results: int) -> CatalogPage:
        """Fetch one page of the container listing."""

    @abstractmethod
    def upload_block(self, name: str, block_index: int, data: bytes) -> int:
        """Stage one block of *name* and return the response status."""

    @abstractmethod
    def commit_blocks(self, name: str, block_count: int) -> int:
        """Commit blocks ``0..block_count-1`` as the content of *name*."""

    @abstractmethod
    def download_range(self, name: str, offset: int, count: int) -> RangeDownload:
        """Read up to *count* bytes of *name* starting at *offset*."""
