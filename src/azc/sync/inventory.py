"""On-demand inspection of a local destination directory."""

from __future__ import annotations

from pathlib import Path

from azc.core.models import LocalFile


class LocalInventory:
    """Looks up files under *root* by remote object name."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def target_path(self, name: str) -> Path:
        return self.root / name

    def contains(self, name: str) -> bool:
        """Whether *name* maps to a path inside the root (no ``..`` or absolute escapes)."""
        return self.target_path(name).resolve().is_relative_to(self.root.resolve())

    def lookup(self, name: str) -> LocalFile | None:
        """Return the local file for *name*, or None if there is no regular file."""
        path = self.target_path(name)
        if not path.is_file():
            return None
        return LocalFile(path=path, size=path.stat().st_size)
