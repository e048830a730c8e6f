"""Azure Blob Storage backend."""

from __future__ import annotations

import base64
from typing import Iterator

from azure.core.exceptions import HttpResponseError
from azure.storage.blob import BlobBlock, ContainerClient

from azc.core.logging import get_logger
from azc.core.models import CatalogPage, RemoteObject
from azc.storage.base import (
    STATUS_CREATED,
    STATUS_OK,
    STATUS_RANGE_NOT_SATISFIABLE,
    RangeDownload,
    StorageBackend,
)

logger = get_logger(__name__)


def block_id(index: int) -> str:
    """Block ids must be base64 and of equal length within a blob."""
    return base64.b64encode(index.to_bytes(8, byteorder="big")).decode("ascii")


class AzureBlobBackend(StorageBackend):
    """Block-blob access to a single Azure container."""

    def __init__(
        self,
        container_name: str,
        account_name: str | None = None,
        account_key: str | None = None,
        proxy_url: str | None = None,
        logging_enable: bool = False,
        container_client: ContainerClient | None = None,
    ):
        if container_client is not None:
            self._container = container_client
            return

        if not (account_name and account_key):
            raise ValueError("Azure storage requires both account_name and account_key")

        kwargs: dict[str, object] = {"logging_enable": logging_enable}
        if proxy_url:
            kwargs["proxies"] = {"http": proxy_url, "https": proxy_url}
            logger.info("Using proxy", proxy=proxy_url)

        self._container = ContainerClient(
            f"https://{account_name}.blob.core.windows.net",
            container_name=container_name,
            credential={"account_name": account_name, "account_key": account_key},
            **kwargs,
        )

    @property
    def container_name(self) -> str:
        return self._container.container_name

    def list_page(self, continuation_token: str | None, max_results: int) -> CatalogPage:
        pages = self._container.list_blobs(results_per_page=max_results).by_page(
            continuation_token=continuation_token
        )
        page = next(pages, None)
        items = tuple(RemoteObject(blob.name, blob.size or 0) for blob in page or ())
        return CatalogPage(items=items, continuation_token=pages.continuation_token or None)

    def upload_block(self, name: str, block_index: int, data: bytes) -> int:
        blob = self._container.get_blob_client(name)
        try:
            blob.stage_block(block_id=block_id(block_index), data=data, length=len(data))
        except HttpResponseError as e:
            logger.debug("stage_block failed", blob=name, block=block_index, error=str(e))
            return e.status_code or 0
        return STATUS_CREATED

    def commit_blocks(self, name: str, block_count: int) -> int:
        blob = self._container.get_blob_client(name)
        blocks = [BlobBlock(block_id=block_id(i)) for i in range(block_count)]
        try:
            blob.commit_block_list(blocks)
        except HttpResponseError as e:
            logger.debug("commit_block_list failed", blob=name, error=str(e))
            return e.status_code or 0
        return STATUS_CREATED

    def download_range(self, name: str, offset: int, count: int) -> RangeDownload:
        blob = self._container.get_blob_client(name)
        try:
            downloader = blob.download_blob(offset=offset, length=count)
        except HttpResponseError as e:
            # A ranged read of an empty blob is rejected; the body is simply empty
            if e.status_code == STATUS_RANGE_NOT_SATISFIABLE and offset == 0:
                logger.debug("Empty blob", blob=name)
                return RangeDownload(status=STATUS_OK, chunks=iter(()))
            return RangeDownload(status=e.status_code or 0, chunks=iter(()))
        return RangeDownload(status=STATUS_OK, chunks=self._iter_chunks(downloader.chunks()))

    @staticmethod
    def _iter_chunks(chunks: Iterator[bytes]) -> Iterator[bytes]:
        for chunk in chunks:
            if chunk:
                yield chunk
