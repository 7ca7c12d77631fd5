"""Field table for :class:`~scenexml.part.SceneObjectPart`."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from . import values
from .faults import PART
from .field_table import FieldError, FieldTableBuilder, decode_fields, encode_fields
from .inventory_codec import read_task_inventory, write_task_inventory
from .options import WriteContext
from .part import PAY_PRICE_SLOTS, SceneObjectPart
from .primitives import PrimFlags
from .shape_codec import read_shape, write_shape
from .xml_writer import XmlWriter

PART_TAG = "SceneObjectPart"
PART_NAMESPACES = {
    "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "xmlns:xsd": "http://www.w3.org/2001/XMLSchema",
}


def _parse_link_number(element: ET.Element) -> int | None:
    number = values.parse_int(values.element_text(element), minimum=-(2**31), maximum=2**31 - 1)
    return number or None


def _write_link_number(writer: XmlWriter, tag: str, value: int | None, context: WriteContext) -> None:
    writer.element_string(tag, str(value or 0))


LINK_NUMBER = values.ValueCodec(_parse_link_number, _write_link_number)


def _read_shape(part: SceneObjectPart, element: ET.Element, errors: list[FieldError]) -> None:
    part.shape = read_shape(element, errors, owner=part)


def _write_shape(writer: XmlWriter, part: SceneObjectPart, context: WriteContext) -> None:
    write_shape(writer, part.shape, context)


def _read_task_inventory(part: SceneObjectPart, element: ET.Element, errors: list[FieldError]) -> None:
    part.task_inventory = read_task_inventory(element, errors)


def _write_task_inventory(writer: XmlWriter, part: SceneObjectPart, context: WriteContext) -> None:
    write_task_inventory(writer, part.task_inventory, context)


def _write_creator_data(writer: XmlWriter, part: SceneObjectPart, context: WriteContext) -> None:
    values.write_creator_data(writer, part.creator_id, part.creator_data, context)


def _read_media_url(part: SceneObjectPart, element: ET.Element, errors: list[FieldError]) -> None:
    part.media_url = values.element_text(element)


def _write_media_url(writer: XmlWriter, part: SceneObjectPart, context: WriteContext) -> None:
    if part.media_url is not None:
        writer.element_string("MediaUrl", part.media_url)


def _pay_price(builder: FieldTableBuilder) -> FieldTableBuilder:
    for slot in range(PAY_PRICE_SLOTS):
        tag = f"PayPrice{slot}"

        def read(part: SceneObjectPart, element: ET.Element, errors: list[FieldError], slot: int = slot) -> None:
            part.pay_price[slot] = values.INT.read(element)

        def write(writer: XmlWriter, part: SceneObjectPart, context: WriteContext, slot: int = slot, tag: str = tag) -> None:
            values.INT.write(writer, tag, part.pay_price[slot], context)

        builder.reader(tag, read).writer(write)
    return builder


PART_TABLE = _pay_price(
    FieldTableBuilder(PART)
    .field("AllowedDrop", "allowed_drop", values.BOOL)
    .field("CreatorID", "creator_id", values.IDENTIFIER)
    .field("CreatorData", "creator_data", values.OPTIONAL_STRING, write=False)
    .writer(_write_creator_data)
    .field("FolderID", "folder_id", values.IDENTIFIER)
    .field("InventorySerial", "inventory_serial", values.UINT)
    .reader("TaskInventory", _read_task_inventory)
    .writer(_write_task_inventory)
    .field("UUID", "uuid", values.IDENTIFIER)
    .field("LocalId", "local_id", values.UINT)
    .field("Name", "name", values.STRING)
    .field("Material", "material", values.BYTE)
    .field("PassTouches", "pass_touches", values.BOOL)
    .field("PassCollisions", "pass_collisions", values.BOOL)
    .field("RegionHandle", "region_handle", values.ULONG)
    .field("ScriptAccessPin", "script_access_pin", values.INT)
    .field("GroupPosition", "group_position", values.VECTOR)
    .field("OffsetPosition", "offset_position", values.VECTOR)
    .field("RotationOffset", "rotation_offset", values.QUATERNION)
    .field("Velocity", "velocity", values.VECTOR)
    .field("AngularVelocity", "angular_velocity", values.VECTOR)
    .field("Acceleration", "acceleration", values.VECTOR)
    .field("Description", "description", values.STRING)
    .field("Color", "color", values.COLOR)
    .field("Text", "text", values.STRING)
    .field("SitName", "sit_name", values.STRING)
    .field("TouchName", "touch_name", values.STRING)
    .field("LinkNum", "link_number", LINK_NUMBER)
    .field("ClickAction", "click_action", values.BYTE)
    .reader("Shape", _read_shape)
    .writer(_write_shape)
    .field("Scale", "scale", values.VECTOR)
    .field("SitTargetOrientation", "sit_target_orientation", values.QUATERNION)
    .field("SitTargetPosition", "sit_target_position", values.VECTOR)
    .field("SitTargetPositionLL", "sit_target_position_ll", values.VECTOR)
    .field("SitTargetOrientationLL", "sit_target_orientation_ll", values.QUATERNION)
    .field("ParentID", "parent_id", values.UINT)
    .field("CreationDate", "creation_date", values.INT)
    .field("Category", "category", values.UINT)
    .field("SalePrice", "sale_price", values.INT)
    .field("ObjectSaleType", "object_sale_type", values.BYTE)
    .field("OwnershipCost", "ownership_cost", values.INT)
    .field("GroupID", "group_id", values.IDENTIFIER)
    .field("OwnerID", "owner_id", values.OWNER_IDENTIFIER)
    .field("LastOwnerID", "last_owner_id", values.OWNER_IDENTIFIER)
    .field("BaseMask", "base_mask", values.UINT)
    .field("OwnerMask", "owner_mask", values.UINT)
    .field("GroupMask", "group_mask", values.UINT)
    .field("EveryoneMask", "everyone_mask", values.UINT)
    .field("NextOwnerMask", "next_owner_mask", values.UINT)
    .field("Flags", "flags", values.flag_set(PrimFlags))
    .field("CollisionSound", "collision_sound", values.IDENTIFIER)
    .field("CollisionSoundVolume", "collision_sound_volume", values.FLOAT)
    .reader("MediaUrl", _read_media_url)
    .writer(_write_media_url)
    .field("TextureAnimation", "texture_animation", values.BLOB)
    .field("ParticleSystem", "particle_system", values.BLOB)
).build()


def read_part(element: ET.Element, errors: list[FieldError]) -> SceneObjectPart:
    """Decode one ``SceneObjectPart`` element, appending field faults to ``errors``."""

    part = SceneObjectPart()
    decode_fields(PART_TABLE, part, element, errors)
    return part


def write_part(writer: XmlWriter, part: SceneObjectPart, context: WriteContext) -> None:
    writer.start_element(PART_TAG, PART_NAMESPACES)
    encode_fields(PART_TABLE, writer, part, context)
    writer.end_element()


__all__ = ["PART_TABLE", "PART_TAG", "read_part", "write_part"]
