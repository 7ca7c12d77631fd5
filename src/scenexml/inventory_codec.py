"""Field table for :class:`~scenexml.inventory.TaskInventoryItem`."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from . import values
from .faults import INVENTORY_ITEM
from .field_table import FieldError, FieldTableBuilder, decode_fields, encode_fields
from .inventory import TaskInventory, TaskInventoryItem
from .options import WriteContext
from .xml_writer import XmlWriter

ITEM_TAG = "TaskInventoryItem"


def _write_creator_data(writer: XmlWriter, item: TaskInventoryItem, context: WriteContext) -> None:
    values.write_creator_data(writer, item.creator_id, item.creator_data, context)


INVENTORY_TABLE = (
    FieldTableBuilder(INVENTORY_ITEM)
    .field("AssetID", "asset_id", values.IDENTIFIER)
    .field("BasePermissions", "base_permissions", values.UINT)
    .field("CreationDate", "creation_date", values.INT)
    .field("CreatorID", "creator_id", values.IDENTIFIER)
    .field("CreatorData", "creator_data", values.OPTIONAL_STRING, write=False)
    .writer(_write_creator_data)
    .field("Description", "description", values.STRING)
    .field("EveryonePermissions", "everyone_permissions", values.UINT)
    .field("Flags", "flags", values.UINT)
    .field("GroupID", "group_id", values.IDENTIFIER)
    .field("GroupPermissions", "group_permissions", values.UINT)
    .field("InvType", "inv_type", values.INT)
    .field("ItemID", "item_id", values.IDENTIFIER)
    .field("OldItemID", "old_item_id", values.OPTIONAL_IDENTIFIER)
    .field("LastOwnerID", "last_owner_id", values.OWNER_IDENTIFIER)
    .field("Name", "name", values.STRING)
    .field("NextPermissions", "next_permissions", values.UINT)
    .field("OwnerID", "owner_id", values.OWNER_IDENTIFIER)
    .field("CurrentPermissions", "current_permissions", values.UINT)
    .field("ParentID", "parent_id", values.IDENTIFIER)
    .field("ParentPartID", "parent_part_id", values.IDENTIFIER)
    .field("PermsGranter", "perms_granter", values.IDENTIFIER)
    .field("PermsMask", "perms_mask", values.INT)
    .field("Type", "type", values.INT)
    .field("OwnerChanged", "owner_changed", values.BOOL)
    .build()
)


def read_inventory_item(element: ET.Element, errors: list[FieldError]) -> TaskInventoryItem:
    item = TaskInventoryItem()
    decode_fields(INVENTORY_TABLE, item, element, errors)
    return item


def read_task_inventory(element: ET.Element, errors: list[FieldError]) -> TaskInventory:
    """Decode every ``TaskInventoryItem`` child of a ``TaskInventory`` element.

    Items are kept in document order; a later item with the same
    identifier replaces an earlier one.
    """

    inventory = TaskInventory()
    for child in element.findall(ITEM_TAG):
        inventory.add(read_inventory_item(child, errors))
    return inventory


def write_inventory_item(writer: XmlWriter, item: TaskInventoryItem, context: WriteContext) -> None:
    writer.start_element(ITEM_TAG)
    encode_fields(INVENTORY_TABLE, writer, item, context)
    writer.end_element()


def write_task_inventory(writer: XmlWriter, inventory: TaskInventory, context: WriteContext) -> None:
    """Write the ``TaskInventory`` element; an empty inventory writes nothing."""

    if not inventory:
        return
    writer.start_element("TaskInventory")
    for item in inventory.values():
        write_inventory_item(writer, item, context)
    writer.end_element()


__all__ = [
    "INVENTORY_TABLE",
    "read_inventory_item",
    "read_task_inventory",
    "write_inventory_item",
    "write_task_inventory",
]
