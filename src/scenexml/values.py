"""Typed conversions between field values and their XML elements.

Every reader takes the field's element and either returns the converted
value or raises :class:`ValueError`. Every writer emits one complete
element. Conventions shared by all fields:

* numbers are written in invariant form; floats use ``repr`` so they read
  back to the identical value;
* booleans are written ``true``/``false`` and read case-insensitively;
* binary blobs are base64, with a missing blob written as an empty element;
* identifiers are wrapped in a ``UUID`` (or legacy ``Guid``) child;
* flag sets are written as member names separated by single spaces.
  Older readers cannot split a comma inside one field, so the comma
  separator is dropped; reading accepts either form.
"""

from __future__ import annotations

import base64
import binascii
import enum
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID

from .options import WriteContext
from .primitives import NIL_UUID, Color, Quaternion, Vector3
from .xml_writer import XmlWriter

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
_NO_FLAGS = "None"


@dataclass(frozen=True)
class ValueCodec:
    """Reader and writer pair for one kind of field value."""

    read: Callable[[ET.Element], Any]
    write: Callable[[XmlWriter, str, Any, WriteContext], None]


def element_text(element: ET.Element) -> str:
    return element.text or ""


# -- scalars -----------------------------------------------------------------


def parse_int(text: str, *, minimum: int, maximum: int) -> int:
    stripped = text.strip()
    if not _INTEGER_PATTERN.match(stripped):
        raise ValueError(f"{text!r} is not an integer")
    value = int(stripped)
    if not minimum <= value <= maximum:
        raise ValueError(f"{value} is outside {minimum}..{maximum}")
    return value


def parse_float(text: str) -> float:
    stripped = text.strip()
    if not stripped or "_" in stripped:
        raise ValueError(f"{text!r} is not a number")
    return float(stripped)


def format_float(value: float) -> str:
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"{text!r} is not a boolean")


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def _scalar(parse: Callable[[str], Any], render: Callable[[Any], str]) -> ValueCodec:
    def read(element: ET.Element) -> Any:
        return parse(element_text(element))

    def write(writer: XmlWriter, tag: str, value: Any, context: WriteContext) -> None:
        writer.element_string(tag, render(value))

    return ValueCodec(read, write)


def integer(minimum: int, maximum: int) -> ValueCodec:
    return _scalar(lambda text: parse_int(text, minimum=minimum, maximum=maximum), str)


def _parse_uint32(text: str) -> int:
    # Negative values are accepted as their two's complement bit pattern.
    return parse_int(text, minimum=-(2**31), maximum=2**32 - 1) & 0xFFFFFFFF


BYTE = integer(0, 0xFF)
SBYTE = integer(-0x80, 0x7F)
USHORT = integer(0, 0xFFFF)
INT = integer(-(2**31), 2**31 - 1)
UINT = _scalar(_parse_uint32, str)
ULONG = integer(0, 2**64 - 1)
FLOAT = _scalar(parse_float, format_float)
BOOL = _scalar(parse_bool, format_bool)
STRING = _scalar(lambda text: text, lambda value: value or "")
OPTIONAL_STRING = _scalar(lambda text: text or None, lambda value: value or "")


# -- identifiers -------------------------------------------------------------


def parse_uuid(element: ET.Element) -> UUID:
    """Read an identifier from a ``UUID``/``Guid`` child or from bare text."""

    child = element.find("UUID")
    if child is None:
        child = element.find("Guid")
    text = element_text(child if child is not None else element).strip()
    if not text:
        return NIL_UUID
    return UUID(text)


def write_uuid(writer: XmlWriter, tag: str, value: UUID | None, context: WriteContext) -> None:
    writer.start_element(tag)
    writer.element_string(context.uuid_tag, str(value or NIL_UUID))
    writer.end_element()


def _parse_optional_uuid(element: ET.Element) -> UUID | None:
    value = parse_uuid(element)
    return None if value == NIL_UUID else value


def write_owner(writer: XmlWriter, tag: str, value: UUID, context: WriteContext) -> None:
    write_uuid(writer, tag, context.owner(value), context)


def write_creator_data(
    writer: XmlWriter, creator_id: UUID, creator_data: str | None, context: WriteContext
) -> None:
    """Write ``CreatorData`` when the entity has attribution or one is synthesized."""

    data = context.creator_data(creator_id, creator_data)
    if data is not None:
        writer.element_string("CreatorData", data)


IDENTIFIER = ValueCodec(parse_uuid, write_uuid)
OPTIONAL_IDENTIFIER = ValueCodec(_parse_optional_uuid, write_uuid)
OWNER_IDENTIFIER = ValueCodec(parse_uuid, write_owner)


# -- compound values ---------------------------------------------------------


def _component(element: ET.Element, name: str) -> float:
    child = element.find(name)
    if child is None:
        raise ValueError(f"missing {name} component")
    return parse_float(element_text(child))


def parse_vector(element: ET.Element) -> Vector3:
    return Vector3(*(_component(element, axis) for axis in ("X", "Y", "Z")))


def write_vector(writer: XmlWriter, tag: str, value: Vector3, context: WriteContext) -> None:
    writer.start_element(tag)
    writer.element_string("X", format_float(value.x))
    writer.element_string("Y", format_float(value.y))
    writer.element_string("Z", format_float(value.z))
    writer.end_element()


def parse_quaternion(element: ET.Element) -> Quaternion:
    return Quaternion(*(_component(element, axis) for axis in ("X", "Y", "Z", "W")))


def write_quaternion(writer: XmlWriter, tag: str, value: Quaternion, context: WriteContext) -> None:
    writer.start_element(tag)
    writer.element_string("X", format_float(value.x))
    writer.element_string("Y", format_float(value.y))
    writer.element_string("Z", format_float(value.z))
    writer.element_string("W", format_float(value.w))
    writer.end_element()


def parse_color(element: ET.Element) -> Color:
    channels = []
    for name in ("R", "G", "B", "A"):
        value = _component(element, name)
        if not math.isfinite(value):
            raise ValueError(f"colour channel {name} is not finite")
        channels.append(int(value))
    return Color(*channels)


def write_color(writer: XmlWriter, tag: str, value: Color, context: WriteContext) -> None:
    writer.start_element(tag)
    writer.element_string("R", str(value.r))
    writer.element_string("G", str(value.g))
    writer.element_string("B", str(value.b))
    writer.element_string("A", str(value.a))
    writer.end_element()


def parse_blob(element: ET.Element) -> bytes | None:
    text = "".join(element_text(element).split())
    if not text:
        return None
    try:
        data = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc
    return data or None


def write_blob(writer: XmlWriter, tag: str, value: bytes | None, context: WriteContext) -> None:
    writer.element_base64(tag, value)


VECTOR = ValueCodec(parse_vector, write_vector)
QUATERNION = ValueCodec(parse_quaternion, write_quaternion)
COLOR = ValueCodec(parse_color, write_color)
BLOB = ValueCodec(parse_blob, write_blob)


# -- enumerations ------------------------------------------------------------


def format_enum(value: int, enum_type: type[enum.IntEnum] | type[enum.IntFlag]) -> str:
    """Render ``value`` by member name, falling back to the plain number."""

    number = int(value)
    if not issubclass(enum_type, enum.Flag):
        try:
            return enum_type(number).name
        except ValueError:
            return str(number)

    if number == 0:
        return _NO_FLAGS
    names = []
    remaining = number
    for member in sorted(enum_type.__members__.values(), key=int):
        bit = int(member)
        if bit and bit & (bit - 1) == 0 and number & bit:
            names.append(member.name)
            remaining &= ~bit
    if remaining:
        return str(number)
    return " ".join(names)


def parse_enum(text: str, enum_type: type[enum.IntEnum] | type[enum.IntFlag]) -> int:
    """Read member names separated by spaces or commas, or a plain number."""

    tokens = text.replace(",", " ").split()
    if not tokens:
        raise ValueError(f"empty {enum_type.__name__} value")

    result = 0
    for token in tokens:
        if _INTEGER_PATTERN.match(token):
            result |= int(token)
        elif token == _NO_FLAGS and issubclass(enum_type, enum.Flag):
            continue
        elif token in enum_type.__members__:
            result |= int(enum_type.__members__[token])
        else:
            raise ValueError(f"unknown {enum_type.__name__} name {token!r}")

    if issubclass(enum_type, enum.Flag):
        return enum_type(result)
    return result


def flag_set(enum_type: type[enum.IntEnum] | type[enum.IntFlag]) -> ValueCodec:
    return _scalar(
        lambda text: parse_enum(text, enum_type),
        lambda value: format_enum(value, enum_type),
    )


__all__ = [
    "BLOB",
    "BOOL",
    "BYTE",
    "COLOR",
    "FLOAT",
    "IDENTIFIER",
    "INT",
    "OPTIONAL_IDENTIFIER",
    "OPTIONAL_STRING",
    "OWNER_IDENTIFIER",
    "QUATERNION",
    "SBYTE",
    "STRING",
    "UINT",
    "ULONG",
    "USHORT",
    "VECTOR",
    "ValueCodec",
    "element_text",
    "flag_set",
    "format_bool",
    "format_enum",
    "format_float",
    "integer",
    "parse_blob",
    "parse_bool",
    "parse_enum",
    "parse_float",
    "parse_int",
    "parse_uuid",
    "write_creator_data",
    "write_owner",
    "write_uuid",
]
