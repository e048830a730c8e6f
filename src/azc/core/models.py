"""
azc data models.

Defines the snapshots of remote and local state that the sync engine
compares, and the result records produced by transfers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator


@dataclass(frozen=True)
class RemoteObject:
    """An object in the remote container, as seen at listing time."""

    name: str
    size: int

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"Remote object size must be non-negative: {self.size}")

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "size": self.size}


@dataclass(frozen=True)
class LocalFile:
    """A file present in a local directory."""

    path: Path
    size: int

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class CatalogPage:
    """One page of a remote listing."""

    items: tuple[RemoteObject, ...] = ()
    continuation_token: str | None = None

    @property
    def has_more(self) -> bool:
        # Azure reports the last page with an empty NextMarker
        return bool(self.continuation_token)


@dataclass(frozen=True)
class Catalog:
    """Complete listing of a container, in page-arrival order."""

    objects: tuple[RemoteObject, ...] = ()

    @classmethod
    def from_iterable(cls, objects: Iterable[RemoteObject]) -> Catalog:
        return cls(objects=tuple(objects))

    def __iter__(self) -> Iterator[RemoteObject]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, name: object) -> bool:
        return self.find(name) is not None if isinstance(name, str) else False

    def find(self, name: str) -> RemoteObject | None:
        """Return the first object with the given name, if any."""
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None

    @property
    def names(self) -> list[str]:
        return [obj.name for obj in self.objects]

    @property
    def total_size(self) -> int:
        return sum(obj.size for obj in self.objects)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": len(self.objects),
            "total_size": self.total_size,
            "objects": [obj.to_dict() for obj in self.objects],
        }


class SyncAction(Enum):
    """What to do with a remote object for a given local state."""

    SKIP = "skip"
    TRANSFER = "transfer"
    ERROR = "error"


@dataclass(frozen=True)
class SyncDecision:
    """Outcome of comparing a remote object against the local copy."""

    action: SyncAction
    reason: str = ""

    @classmethod
    def skip(cls, reason: str = "") -> SyncDecision:
        return cls(SyncAction.SKIP, reason)

    @classmethod
    def transfer(cls, reason: str = "") -> SyncDecision:
        return cls(SyncAction.TRANSFER, reason)

    @classmethod
    def error(cls, reason: str) -> SyncDecision:
        return cls(SyncAction.ERROR, reason)

    @property
    def should_transfer(self) -> bool:
        return self.action is SyncAction.TRANSFER


@dataclass
class UploadResult:
    """Result of uploading a single file."""

    name: str
    source: Path
    size: int = 0
    blocks: int = 0
    status: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": str(self.source),
            "size": self.size,
            "blocks": self.blocks,
            "status": self.status,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class DownloadResult:
    """Result of downloading a single object."""

    name: str
    destination: Path
    size: int = 0
    chunks: int = 0
    status: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "destination": str(self.destination),
            "size": self.size,
            "chunks": self.chunks,
            "status": self.status,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class ItemOutcome:
    """What happened to one item during a run."""

    name: str
    action: SyncAction
    reason: str = ""
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "action": self.action.value,
            "reason": self.reason,
            "size": self.size,
        }


@dataclass
class SyncSummary:
    transferred: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_transferred: int = 0


@dataclass
class SyncStatus:
    """Report of a single verb invocation."""

    verb: str
    started_at: datetime
    ended_at: datetime | None = None
    summary: SyncSummary = field(default_factory=SyncSummary)
    items: list[ItemOutcome] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_transfer(self, name: str, size: int, reason: str = "") -> None:
        self.items.append(ItemOutcome(name, SyncAction.TRANSFER, reason, size))
        self.summary.transferred += 1
        self.summary.bytes_transferred += size

    def record_skip(self, name: str, reason: str = "", size: int = 0) -> None:
        self.items.append(ItemOutcome(name, SyncAction.SKIP, reason, size))
        self.summary.skipped += 1

    def record_error(self, name: str, reason: str) -> None:
        self.items.append(ItemOutcome(name, SyncAction.ERROR, reason))
        self.errors.append(f"{name}: {reason}")
        self.summary.errors += 1

    @property
    def ok(self) -> bool:
        return self.summary.errors == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "verb": self.verb,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "summary": {
                "transferred": self.summary.transferred,
                "skipped": self.summary.skipped,
                "errors": self.summary.errors,
                "bytes_transferred": self.summary.bytes_transferred,
            },
            "items": [item.to_dict() for item in self.items],
            "errors": self.errors,
        }
