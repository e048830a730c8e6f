"""
Transfer decisions.

A local copy counts as current when its size equals the remote size.
Content is never hashed; this is a cheap heuristic, not a guarantee that
the bytes are identical.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from azc.core.models import LocalFile, RemoteObject, SyncDecision
from azc.sync.inventory import LocalInventory

REASON_MISSING = "not present locally"
REASON_CURRENT = "current copy present"
REASON_SIZE_MISMATCH = "size mismatch"
REASON_OUTSIDE_ROOT = "name resolves outside the destination directory"


def decide(remote: RemoteObject, local: LocalFile | None) -> SyncDecision:
    """Decide whether *remote* needs downloading over *local*."""
    if local is None:
        return SyncDecision.transfer(REASON_MISSING)
    if local.size == remote.size:
        return SyncDecision.skip(REASON_CURRENT)
    return SyncDecision.transfer(f"{REASON_SIZE_MISMATCH} (local {local.size}, remote {remote.size})")


def plan_item(
    remote: RemoteObject, inventory: LocalInventory
) -> tuple[LocalFile | None, SyncDecision]:
    """Look up the local copy of *remote* and decide.

    Names that would land outside the inventory root are refused with an
    ERROR decision and never looked up.
    """
    if not inventory.contains(remote.name):
        return None, SyncDecision.error(REASON_OUTSIDE_ROOT)
    local = inventory.lookup(remote.name)
    return local, decide(remote, local)


def plan(
    objects: Iterable[RemoteObject], inventory: LocalInventory
) -> Iterator[tuple[RemoteObject, LocalFile | None, SyncDecision]]:
    """Pair each remote object with its local file and decision."""
    for remote in objects:
        local, decision = plan_item(remote, inventory)
        yield remote, local, decision
