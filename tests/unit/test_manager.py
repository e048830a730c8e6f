"""
Tests for azc.sync.manager module.
"""

from pathlib import Path

import pytest

from azc.core.config import TransferConfig
from azc.core.exceptions import CatalogError, PlanningInconsistency
from azc.core.models import Catalog, SyncAction, SyncStatus
from azc.sync.manager import SyncManager
from conftest import FakeBackend


class TestSend:
    """Tests for the send verb."""

    def test_each_file_uploaded(self, temp_dir: Path) -> None:
        paths = []
        for name in ("one.txt", "two.txt"):
            path = temp_dir / name
            path.write_text(name)
            paths.append(path)
        backend = FakeBackend()

        status = SyncManager(backend).send(paths)

        assert status.summary.transferred == 2
        assert status.summary.bytes_transferred == 14
        assert backend.blobs == {"one.txt": b"one.txt", "two.txt": b"two.txt"}
        assert status.ended_at is not None

    def test_failure_does_not_stop_batch(self, temp_dir: Path) -> None:
        first = temp_dir / "first"
        first.write_bytes(b"1")
        third = temp_dir / "third"
        third.write_bytes(b"3")
        backend = FakeBackend()

        status = SyncManager(backend).send([first, temp_dir / "missing", third])

        assert status.summary.transferred == 2
        assert status.summary.errors == 1
        assert status.errors[0].startswith("missing: ")
        assert set(backend.blobs) == {"first", "third"}

    def test_rejected_upload_recorded(self, temp_dir: Path) -> None:
        source = temp_dir / "denied"
        source.write_bytes(b"data")
        backend = FakeBackend()
        backend.upload_status["denied"] = 403

        status = SyncManager(backend).send([source])

        assert status.ok is False
        assert "status 403" in status.errors[0]


class TestGet:
    """Tests for the get verb."""

    def test_missing_local_is_downloaded(self, temp_dir: Path, backend: FakeBackend) -> None:
        status = SyncManager(backend).get(["image.png"], temp_dir)

        assert (temp_dir / "image.png").read_bytes() == b"i" * 2048
        assert status.summary.transferred == 1

    def test_current_copy_skipped(self, temp_dir: Path, backend: FakeBackend) -> None:
        (temp_dir / "report.csv").write_bytes(b"L" * 500)

        status = SyncManager(backend).get(["report.csv"], temp_dir)

        assert backend.download_calls == []
        assert (temp_dir / "report.csv").read_bytes() == b"L" * 500
        assert status.items[0].action is SyncAction.SKIP
        assert status.items[0].size == 500

    def test_size_mismatch_downloaded(self, temp_dir: Path, backend: FakeBackend) -> None:
        (temp_dir / "report.csv").write_bytes(b"L" * 10)

        status = SyncManager(backend).get(["report.csv"], temp_dir)

        assert (temp_dir / "report.csv").read_bytes() == b"r" * 500
        assert "size mismatch" in status.items[0].reason

    def test_unknown_name_aborts(self, temp_dir: Path, backend: FakeBackend) -> None:
        with pytest.raises(PlanningInconsistency, match="ghost"):
            SyncManager(backend).get(["report.csv", "ghost", "image.png"], temp_dir)

        assert (temp_dir / "report.csv").read_bytes() == b"r" * 500
        assert not (temp_dir / "ghost").exists()
        assert not (temp_dir / "image.png").exists()
        assert [call[0] for call in backend.download_calls] == ["report.csv"]

    def test_unknown_name_with_local_file_aborts(
        self, temp_dir: Path, backend: FakeBackend
    ) -> None:
        (temp_dir / "ghost").write_bytes(b"local only")

        with pytest.raises(PlanningInconsistency, match="ghost"):
            SyncManager(backend).get(["report.csv", "ghost", "image.png"], temp_dir)

        assert (temp_dir / "report.csv").read_bytes() == b"r" * 500
        assert not (temp_dir / "image.png").exists()
        assert [call[0] for call in backend.download_calls] == ["report.csv"]

    def test_requested_name_escaping_destination_is_refused(self, temp_dir: Path) -> None:
        backend = FakeBackend({"../escape": b"evil"})

        status = SyncManager(backend).get(["../escape"], temp_dir / "dest")

        assert status.errors == ["../escape: name resolves outside the destination directory"]
        assert backend.download_calls == []

    def test_listing_failure_propagates(self, temp_dir: Path, backend: FakeBackend) -> None:
        backend.fail_list_at = 0

        with pytest.raises(CatalogError):
            SyncManager(backend).get(["report.csv"], temp_dir)

    def test_failed_download_does_not_stop_batch(
        self, temp_dir: Path, backend: FakeBackend
    ) -> None:
        backend.download_status["report.csv"] = 503

        status = SyncManager(backend).get(["report.csv", "image.png"], temp_dir)

        assert status.summary.errors == 1
        assert status.summary.transferred == 1
        assert (temp_dir / "image.png").exists()


class TestGetAll:
    """Tests for the getAll verb."""

    def test_downloads_everything_missing(self, temp_dir: Path, backend: FakeBackend) -> None:
        status = SyncManager(backend).get_all(temp_dir)

        assert status.summary.transferred == 2
        assert sorted(p.name for p in temp_dir.iterdir()) == ["image.png", "report.csv"]

    def test_name_escaping_destination_is_refused(self, temp_dir: Path) -> None:
        dest = temp_dir / "dest"
        backend = FakeBackend({"../escape": b"evil", "ok.txt": b"fine"})

        status = SyncManager(backend).get_all(dest)

        assert not (temp_dir / "escape").exists()
        assert (dest / "ok.txt").read_bytes() == b"fine"
        assert status.summary.errors == 1
        assert status.items[0].action is SyncAction.ERROR
        assert [call[0] for call in backend.download_calls] == ["ok.txt"]

    def test_empty_container(self, temp_dir: Path) -> None:
        status = SyncManager(FakeBackend()).get_all(temp_dir)

        assert status.items == []
        assert status.ok is True

    def test_spans_listing_pages(self, temp_dir: Path) -> None:
        backend = FakeBackend({f"part-{i}": b"p" * i for i in range(1, 6)})
        manager = SyncManager(backend, TransferConfig(page_size=2))

        status = manager.get_all(temp_dir)

        assert status.summary.transferred == 5
        assert len(backend.list_calls) == 3


class TestRun:
    """Tests for verb dispatch."""

    def test_list(self, backend: FakeBackend) -> None:
        result = SyncManager(backend).run("list")

        assert isinstance(result, Catalog)
        assert result.names == ["report.csv", "image.png"]

    def test_get_all(self, temp_dir: Path, backend: FakeBackend) -> None:
        result = SyncManager(backend).run("getAll", destination=temp_dir)

        assert isinstance(result, SyncStatus)
        assert result.verb == "getAll"

    def test_unknown_verb(self, backend: FakeBackend) -> None:
        with pytest.raises(ValueError, match="Unsupported verb"):
            SyncManager(backend).run("delete")

    def test_progress_callback_gets_item_name(
        self, temp_dir: Path, backend: FakeBackend
    ) -> None:
        seen: set[str] = set()
        manager = SyncManager(backend, on_progress=lambda name, done, total: seen.add(name))

        manager.run("get", ["report.csv"], temp_dir)

        assert seen == {"report.csv"}
