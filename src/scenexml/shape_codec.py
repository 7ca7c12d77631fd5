"""Field table for :class:`~scenexml.shape.PrimitiveShape`."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from . import values
from .faults import SHAPE
from .field_table import FieldError, FieldTableBuilder, decode_fields, encode_fields
from .media import MediaList
from .options import WriteContext
from .primitives import HollowShape, ProfileShape
from .shape import PrimitiveShape
from .xml_writer import XmlWriter


def _read_media(shape: PrimitiveShape, element: ET.Element, errors: list[FieldError]) -> None:
    text = values.element_text(element).strip()
    shape.media = MediaList.from_xml(text) if text else None


def _write_media(writer: XmlWriter, shape: PrimitiveShape, context: WriteContext) -> None:
    if shape.media is not None:
        writer.element_string("Media", shape.media.to_xml())


SHAPE_TABLE = (
    FieldTableBuilder(SHAPE)
    .field("ProfileCurve", "profile_curve", values.BYTE)
    .field("TextureEntry", "texture_entry", values.BLOB)
    .field("ExtraParams", "extra_params", values.BLOB)
    .field("PathBegin", "path_begin", values.USHORT)
    .field("PathCurve", "path_curve", values.BYTE)
    .field("PathEnd", "path_end", values.USHORT)
    .field("PathRadiusOffset", "path_radius_offset", values.SBYTE)
    .field("PathRevolutions", "path_revolutions", values.BYTE)
    .field("PathScaleX", "path_scale_x", values.BYTE)
    .field("PathScaleY", "path_scale_y", values.BYTE)
    .field("PathShearX", "path_shear_x", values.BYTE)
    .field("PathShearY", "path_shear_y", values.BYTE)
    .field("PathSkew", "path_skew", values.SBYTE)
    .field("PathTaperX", "path_taper_x", values.SBYTE)
    .field("PathTaperY", "path_taper_y", values.SBYTE)
    .field("PathTwist", "path_twist", values.SBYTE)
    .field("PathTwistBegin", "path_twist_begin", values.SBYTE)
    .field("PCode", "pcode", values.BYTE)
    .field("ProfileBegin", "profile_begin", values.USHORT)
    .field("ProfileEnd", "profile_end", values.USHORT)
    .field("ProfileHollow", "profile_hollow", values.USHORT)
    # The part writes its own Scale; older documents carry one here too.
    .field("Scale", "scale", values.VECTOR, write=False)
    .field("State", "state", values.BYTE)
    .field("ProfileShape", "profile_shape", values.flag_set(ProfileShape))
    .field("HollowShape", "hollow_shape", values.flag_set(HollowShape))
    .field("SculptTexture", "sculpt_texture", values.IDENTIFIER)
    .field("SculptType", "sculpt_type", values.BYTE)
    .field("SculptData", "sculpt_data", values.BLOB)
    .field("FlexiSoftness", "flexi_softness", values.INT)
    .field("FlexiTension", "flexi_tension", values.FLOAT)
    .field("FlexiDrag", "flexi_drag", values.FLOAT)
    .field("FlexiGravity", "flexi_gravity", values.FLOAT)
    .field("FlexiWind", "flexi_wind", values.FLOAT)
    .field("FlexiForceX", "flexi_force_x", values.FLOAT)
    .field("FlexiForceY", "flexi_force_y", values.FLOAT)
    .field("FlexiForceZ", "flexi_force_z", values.FLOAT)
    .field("LightColorR", "light_color_r", values.FLOAT)
    .field("LightColorG", "light_color_g", values.FLOAT)
    .field("LightColorB", "light_color_b", values.FLOAT)
    .field("LightColorA", "light_color_a", values.FLOAT)
    .field("LightRadius", "light_radius", values.FLOAT)
    .field("LightCutoff", "light_cutoff", values.FLOAT)
    .field("LightFalloff", "light_falloff", values.FLOAT)
    .field("LightIntensity", "light_intensity", values.FLOAT)
    .field("FlexiEntry", "flexi_entry", values.BOOL)
    .field("LightEntry", "light_entry", values.BOOL)
    .field("SculptEntry", "sculpt_entry", values.BOOL)
    .reader("Media", _read_media)
    .writer(_write_media)
    .build()
)


def read_shape(element: ET.Element, errors: list[FieldError], owner: Any) -> PrimitiveShape:
    """Decode a ``Shape`` element; faults are reported against ``owner``."""

    shape = PrimitiveShape()
    decode_fields(SHAPE_TABLE, shape, element, errors, owner=owner)
    return shape


def write_shape(writer: XmlWriter, shape: PrimitiveShape, context: WriteContext) -> None:
    writer.start_element("Shape")
    encode_fields(SHAPE_TABLE, writer, shape, context)
    writer.end_element()


__all__ = ["SHAPE_TABLE", "read_shape", "write_shape"]
