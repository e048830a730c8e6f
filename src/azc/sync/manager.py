"""
azc sync manager.

Runs the list, send, get and getAll verbs. Transfers are sequential and
each item's failure is recorded without stopping the rest of the batch.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from azc.core.config import TransferConfig
from azc.core.exceptions import DownloadError, PlanningInconsistency, UploadError
from azc.core.logging import get_logger
from azc.core.models import Catalog, SyncAction, SyncDecision, SyncStatus
from azc.storage.base import StorageBackend
from azc.sync.catalog import ListOptions, RemoteCatalog
from azc.sync.inventory import LocalInventory
from azc.sync.planner import plan, plan_item
from azc.sync.transfer import ProgressCallback, TransferEngine

logger = get_logger(__name__)

VERB_LIST = "list"
VERB_SEND = "send"
VERB_GET = "get"
VERB_GET_ALL = "getAll"
VERBS = (VERB_LIST, VERB_SEND, VERB_GET, VERB_GET_ALL)

ItemProgressCallback = Callable[[str, int, int | None], None]


class SyncManager:
    """Composes the catalog, planner and transfer engine into verbs."""

    def __init__(
        self,
        backend: StorageBackend,
        config: TransferConfig | None = None,
        on_progress: ItemProgressCallback | None = None,
    ) -> None:
        self.config = config or TransferConfig()
        self.catalog = RemoteCatalog(backend)
        self.transfer = TransferEngine(backend, self.config)
        self.list_options = ListOptions(page_size=self.config.page_size)
        self.on_progress = on_progress

    def run(
        self,
        verb: str,
        files: Iterable[str | Path] = (),
        destination: Path | None = None,
    ) -> Catalog | SyncStatus:
        """Dispatch *verb* to the matching operation."""
        destination = Path(destination) if destination is not None else Path.cwd()

        if verb == VERB_LIST:
            return self.list_remote()
        if verb == VERB_SEND:
            return self.send(files)
        if verb == VERB_GET:
            return self.get(files, destination)
        if verb == VERB_GET_ALL:
            return self.get_all(destination)

        raise ValueError(f"Unsupported verb: {verb!r}. Supported: {', '.join(VERBS)}")

    def list_remote(self) -> Catalog:
        """List every object in the container."""
        catalog = self.catalog.snapshot(self.list_options)
        for obj in catalog:
            logger.info(obj.name, size=obj.size)
        return catalog

    def send(self, files: Iterable[str | Path]) -> SyncStatus:
        """Upload each file under its base name."""
        status = SyncStatus(verb=VERB_SEND, started_at=datetime.now())

        try:
            for path in files:
                path = Path(path)
                try:
                    result = self.transfer.upload(path, on_progress=self._progress_for(path.name))
                except UploadError as exc:
                    logger.error("Upload failed", file=str(path), error=str(exc))
                    status.record_error(path.name, exc.detail)
                    continue

                logger.info("Uploaded", **result.to_dict())
                status.record_transfer(result.name, result.size)
        finally:
            status.ended_at = datetime.now()

        return status

    def get(self, names: Iterable[str | Path], destination: Path) -> SyncStatus:
        """
        Download the named objects into *destination*.

        Names are processed in order. Objects already downloaded stay on
        disk if a later name turns out to be unknown.

        Raises:
            PlanningInconsistency: A name is not in the container listing.
            CatalogError: The listing could not be fetched.
        """
        status = SyncStatus(verb=VERB_GET, started_at=datetime.now())
        inventory = LocalInventory(destination)

        try:
            catalog = self.catalog.snapshot(self.list_options)

            for name in names:
                name = str(name)
                remote = catalog.find(name)
                if remote is None:
                    raise PlanningInconsistency(name)

                _local, decision = plan_item(remote, inventory)
                self._apply(name, decision, inventory, remote.size, status)
        finally:
            status.ended_at = datetime.now()

        return status

    def get_all(self, destination: Path) -> SyncStatus:
        """Download every object in the container that is not already current."""
        status = SyncStatus(verb=VERB_GET_ALL, started_at=datetime.now())
        inventory = LocalInventory(destination)

        try:
            catalog = self.catalog.snapshot(self.list_options)

            for remote, _local, decision in plan(catalog, inventory):
                self._apply(remote.name, decision, inventory, remote.size, status)
        finally:
            status.ended_at = datetime.now()

        return status

    def _apply(
        self,
        name: str,
        decision: SyncDecision,
        inventory: LocalInventory,
        expected_size: int | None,
        status: SyncStatus,
    ) -> None:
        target = inventory.target_path(name)

        if decision.action is SyncAction.SKIP:
            logger.info("Current copy present, skipping", blob=name, path=str(target))
            status.record_skip(name, decision.reason, expected_size or 0)
            return

        # Produced by the planner for names that escape the destination
        if decision.action is SyncAction.ERROR:
            logger.error("Cannot sync", blob=name, reason=decision.reason)
            status.record_error(name, decision.reason)
            return

        logger.info("Downloading", blob=name, reason=decision.reason)
        try:
            result = self.transfer.download(
                name,
                target,
                expected_size=expected_size,
                on_progress=self._progress_for(name),
            )
        except DownloadError as exc:
            logger.error("Download failed", blob=name, error=str(exc))
            status.record_error(name, exc.detail)
            return

        logger.info("Downloaded", **result.to_dict())
        status.record_transfer(name, result.size, decision.reason)

    def _progress_for(self, name: str) -> ProgressCallback | None:
        if self.on_progress is None:
            return None
        callback = self.on_progress

        def report(transferred: int, total: int | None) -> None:
            callback(name, transferred, total)

        return report
