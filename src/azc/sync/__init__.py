"""
azc sync module.

Remote listing, local inventory, skip/transfer decisions, single-object
transfers, and the verbs that compose them.
"""

from azc.sync.catalog import ListOptions, RemoteCatalog
from azc.sync.inventory import LocalInventory
from azc.sync.manager import VERBS, SyncManager
from azc.sync.planner import decide, plan, plan_item
from azc.sync.transfer import TransferEngine

__all__ = [
    "ListOptions",
    "RemoteCatalog",
    "LocalInventory",
    "VERBS",
    "SyncManager",
    "decide",
    "plan",
    "plan_item",
    "TransferEngine",
]
