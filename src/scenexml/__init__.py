"""Core package for reading and writing persisted scene objects."""

from .primitives import (
    NIL_UUID,
    Color,
    HollowShape,
    PrimFlags,
    ProfileShape,
    Quaternion,
    Vector3,
)
from .media import MediaEntry, MediaList
from .shape import PrimitiveShape
from .inventory import TaskInventory, TaskInventoryItem
from .part import SceneObjectPart
from .group import SceneObjectGroup
from .faults import DecodeResult, FieldFault, SceneObjectDecodeError, StructuralFault
from .options import (
    JsonUserNameService,
    LazyUserNameService,
    SerializationOptions,
    UserNameService,
)
from .serializer import (
    from_original_xml,
    from_xml2,
    part_from_xml2,
    part_to_xml2,
    serialize_script_states,
    to_original_xml,
    to_original_xml_with_state,
    to_xml2,
    write_original_xml,
    write_xml2,
)

__all__ = [
    "NIL_UUID",
    "Color",
    "HollowShape",
    "PrimFlags",
    "ProfileShape",
    "Quaternion",
    "Vector3",
    "MediaEntry",
    "MediaList",
    "PrimitiveShape",
    "TaskInventory",
    "TaskInventoryItem",
    "SceneObjectPart",
    "SceneObjectGroup",
    "DecodeResult",
    "FieldFault",
    "SceneObjectDecodeError",
    "StructuralFault",
    "JsonUserNameService",
    "LazyUserNameService",
    "SerializationOptions",
    "UserNameService",
    "from_original_xml",
    "from_xml2",
    "part_from_xml2",
    "part_to_xml2",
    "serialize_script_states",
    "to_original_xml",
    "to_original_xml_with_state",
    "to_xml2",
    "write_original_xml",
    "write_xml2",
]
