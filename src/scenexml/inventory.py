"""Inventory items embedded in a scene object part."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterable

from .primitives import NIL_UUID

PERM_ALL = 0x7FFFFFFF


@dataclass
class TaskInventoryItem:
    """A single inventory entry (script, notecard, texture...) inside a part.

    ``old_item_id`` names the item this one replaced, ``None`` when it
    replaced nothing. ``creator_data`` holds the creator attribution
    string; ``None`` means attribution is by ``creator_id`` alone.
    """

    item_id: uuid.UUID = field(default_factory=uuid.uuid4)
    old_item_id: uuid.UUID | None = None
    asset_id: uuid.UUID = NIL_UUID
    parent_id: uuid.UUID = NIL_UUID
    parent_part_id: uuid.UUID = NIL_UUID
    owner_id: uuid.UUID = NIL_UUID
    creator_id: uuid.UUID = NIL_UUID
    creator_data: str | None = None
    group_id: uuid.UUID = NIL_UUID
    last_owner_id: uuid.UUID = NIL_UUID
    perms_granter: uuid.UUID = NIL_UUID

    base_permissions: int = PERM_ALL
    current_permissions: int = PERM_ALL
    group_permissions: int = 0
    everyone_permissions: int = 0
    next_permissions: int = PERM_ALL
    perms_mask: int = 0
    flags: int = 0

    inv_type: int = 0
    type: int = 0
    name: str = ""
    description: str = ""
    creation_date: int = 0
    owner_changed: bool = False

    def __post_init__(self) -> None:
        if self.old_item_id == NIL_UUID:
            self.old_item_id = None
        if self.creator_data == "":
            self.creator_data = None


class TaskInventory(dict[uuid.UUID, TaskInventoryItem]):
    """Insertion-ordered inventory of a part, keyed by item identifier."""

    def __init__(self, items: Iterable[TaskInventoryItem] = ()) -> None:
        super().__init__()
        for item in items:
            self.add(item)

    def add(self, item: TaskInventoryItem) -> None:
        """Store ``item`` under its identifier, replacing any previous entry."""

        self[item.item_id] = item

    def remove(self, item_id: uuid.UUID) -> bool:
        """Remove the item with ``item_id``; return ``True`` if it existed."""

        return self.pop(item_id, None) is not None


__all__ = ["PERM_ALL", "TaskInventory", "TaskInventoryItem"]
