"""
Transfer logic for single objects.

Uploads are staged in fixed-size blocks and committed at the end, so a file
is never held in memory as a whole. Downloads request one byte range and
stream the response body straight into the destination file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from azc.core.config import TransferConfig
from azc.core.exceptions import DownloadError, UploadError
from azc.core.logging import OperationLogger, get_logger
from azc.core.models import DownloadResult, UploadResult
from azc.storage.base import STATUS_CREATED, StorageBackend

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int | None], None]


class TransferEngine:
    """Moves one named object at a time between disk and the backend."""

    def __init__(self, backend: StorageBackend, config: TransferConfig | None = None) -> None:
        self.backend = backend
        self.config = config or TransferConfig()

    def upload(
        self,
        source: Path,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """
        Upload *source* under its base name.

        Args:
            source: Local file to send.
            on_progress: Callback(transferred, total) after each block.

        Returns:
            UploadResult with the size, block count and commit status.

        Raises:
            UploadError: If the file cannot be read, is too large, or the
                backend reports a non-success status. Not retried.
        """
        source = Path(source)
        name = source.name

        with OperationLogger("upload", logger, blob=name, source=str(source)) as op:
            try:
                size = source.stat().st_size
            except OSError as e:
                raise UploadError(name, message=f"cannot read {source}: {e.strerror or e}") from e

            if size > self.config.max_object_size:
                raise UploadError(
                    name,
                    message=f"{size} bytes exceeds the {self.config.max_object_size} byte object limit",
                )

            try:
                blocks, sent = self._stage_blocks(name, source, size, on_progress)
                status = self.backend.commit_blocks(name, blocks)
            except UploadError:
                raise
            except Exception as e:
                raise UploadError(name, message=str(e)) from e

            if status != STATUS_CREATED:
                raise UploadError(name, status, "commit failed")

            op.update(size=sent, blocks=blocks, status=status)
            return UploadResult(
                name=name,
                source=source,
                size=sent,
                blocks=blocks,
                status=status,
                duration_seconds=op.elapsed,
            )

    def _stage_blocks(
        self,
        name: str,
        source: Path,
        total: int,
        on_progress: ProgressCallback | None,
    ) -> tuple[int, int]:
        blocks = 0
        sent = 0
        with open(source, "rb") as handle:
            while True:
                data = handle.read(self.config.block_size)
                if not data:
                    break
                status = self.backend.upload_block(name, blocks, data)
                if status != STATUS_CREATED:
                    raise UploadError(name, status, f"block {blocks} rejected")
                blocks += 1
                sent += len(data)
                if sent > self.config.max_object_size:
                    raise UploadError(name, message="file grew past the object size limit during upload")
                if on_progress:
                    on_progress(sent, total)
        return blocks, sent

    def download(
        self,
        name: str,
        destination: Path,
        expected_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> DownloadResult:
        """
        Download *name* into *destination*, replacing any existing file.

        Only the first ``download_range`` bytes are requested. A failure
        part-way through can leave a truncated file behind.

        Raises:
            DownloadError: If the backend reports a non-success status or
                the stream or the file write fails.
        """
        destination = Path(destination)

        with OperationLogger("download", logger, blob=name, destination=str(destination)) as op:
            try:
                response = self.backend.download_range(name, 0, self.config.download_range)
            except Exception as e:
                raise DownloadError(name, message=str(e)) from e

            if not response.ok:
                raise DownloadError(name, response.status, "download failed")

            written = 0
            chunks = 0
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                with open(destination, "wb") as handle:
                    for chunk in response.chunks:
                        handle.write(chunk)
                        written += len(chunk)
                        chunks += 1
                        if on_progress:
                            on_progress(written, expected_size)
            except Exception as e:
                raise DownloadError(name, message=f"writing {destination} failed: {e}") from e

            op.update(size=written, chunks=chunks)
            return DownloadResult(
                name=name,
                destination=destination,
                size=written,
                chunks=chunks,
                status=response.status,
                duration_seconds=op.elapsed,
            )
