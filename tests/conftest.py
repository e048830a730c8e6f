"""
Pytest configuration and fixtures for azc tests.
"""

import sys
import tempfile
from pathlib import Path
from typing import Generator, Iterator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from azc.core.models import CatalogPage, RemoteObject  # noqa: E402
from azc.storage.base import (  # noqa: E402
    STATUS_CREATED,
    STATUS_PARTIAL_CONTENT,
    RangeDownload,
    StorageBackend,
)

STORAGE_ENV_VARS = (
    "AZURE_STORAGE_ACCOUNT",
    "AZURE_STORAGE_ACCESS_KEY",
    "CONTAINER_NAME",
    "USE_PROXY",
    "HTTPS_PROXY",
    "HTTPS_PROXY_PORT",
)


class FakeBackend(StorageBackend):
    """In-memory container with scripted listing pages and failure injection."""

    def __init__(
        self,
        blobs: dict[str, bytes] | None = None,
        page_size: int | None = None,
    ) -> None:
        self.blobs: dict[str, bytes] = dict(blobs or {})
        self.page_size = page_size
        self.pages: list[CatalogPage] | None = None
        self.list_calls: list[str | None] = []
        self.staged: dict[str, dict[int, bytes]] = {}
        self.upload_calls: list[tuple[str, int, int]] = []
        self.download_calls: list[tuple[str, int, int]] = []
        self.fail_list_at: int | None = None
        self.upload_status: dict[str, int] = {}
        self.commit_status: dict[str, int] = {}
        self.download_status: dict[str, int] = {}
        self.broken_streams: set[str] = set()
        self.chunk_size = 4

    def script_pages(self, pages: list[CatalogPage]) -> None:
        """Serve these pages instead of paginating ``blobs``."""
        self.pages = pages

    def list_page(self, continuation_token: str | None, max_results: int) -> CatalogPage:
        self.list_calls.append(continuation_token)
        index = 0 if continuation_token is None else int(continuation_token)

        if self.fail_list_at is not None and index == self.fail_list_at:
            raise ConnectionError(f"listing page {index} unavailable")

        if self.pages is not None:
            return self.pages[index]

        size = self.page_size or max_results
        names = list(self.blobs)
        start = index * size
        items = tuple(RemoteObject(name, len(self.blobs[name])) for name in names[start:start + size])
        token = str(index + 1) if start + size < len(names) else None
        return CatalogPage(items=items, continuation_token=token)

    def upload_block(self, name: str, block_index: int, data: bytes) -> int:
        self.upload_calls.append((name, block_index, len(data)))
        status = self.upload_status.get(name, STATUS_CREATED)
        if status == STATUS_CREATED:
            self.staged.setdefault(name, {})[block_index] = data
        return status

    def commit_blocks(self, name: str, block_count: int) -> int:
        status = self.commit_status.get(name, STATUS_CREATED)
        if status != STATUS_CREATED:
            return status
        staged = self.staged.pop(name, {})
        self.blobs[name] = b"".join(staged[i] for i in range(block_count))
        return status

    def download_range(self, name: str, offset: int, count: int) -> RangeDownload:
        self.download_calls.append((name, offset, count))
        if name in self.download_status:
            return RangeDownload(status=self.download_status[name], chunks=iter(()))
        if name not in self.blobs:
            return RangeDownload(status=404, chunks=iter(()))
        data = self.blobs[name][offset:offset + count]
        return RangeDownload(status=STATUS_PARTIAL_CONTENT, chunks=self._stream(name, data))

    def _stream(self, name: str, data: bytes) -> Iterator[bytes]:
        for start in range(0, len(data), self.chunk_size):
            if name in self.broken_streams and start > 0:
                raise ConnectionResetError("connection dropped mid-stream")
            yield data[start:start + self.chunk_size]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def backend() -> FakeBackend:
    """A fake container holding two small objects."""
    return FakeBackend(
        {
            "report.csv": b"r" * 500,
            "image.png": b"i" * 2048,
        }
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove storage settings from the environment."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def properties_file(temp_dir: Path) -> Path:
    """A properties file with complete credentials."""
    path = temp_dir / "azc.properties"
    path.write_text(
        "# azc credentials\n"
        "AZURE_STORAGE_ACCOUNT=fileaccount\n"
        "AZURE_STORAGE_ACCESS_KEY=ZmlsZWtleQ==\n"
        "CONTAINER_NAME=filecontainer\n"
    )
    return path


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
