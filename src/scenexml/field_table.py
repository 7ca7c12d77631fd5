"""Tag-indexed readers and ordered writers for one kind of entity.

A :class:`FieldTable` pairs a read-only ``tag -> reader`` mapping with
the tuple of writers that produce the entity's fields in their released
order. Reading is driven by the document; writing is driven by the
table.
"""

from __future__ import annotations

import binascii
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from .faults import FieldFault
from .options import WriteContext
from .values import ValueCodec
from .xml_writer import XmlWriter

logger = logging.getLogger(__name__)

Reader = Callable[[Any, ET.Element, list["FieldError"]], None]
Writer = Callable[[XmlWriter, Any, WriteContext], None]

_FIELD_EXCEPTIONS = (ValueError, TypeError, KeyError, binascii.Error)


@dataclass(frozen=True)
class FieldError:
    """A field that failed to decode, before its owner's identity is final.

    ``owner`` is the entity the fault is reported against. For nested
    records without an identity of their own (a part's shape) it is the
    enclosing entity.
    """

    kind: str
    owner: Any
    tag: str
    cause: str


@dataclass(frozen=True)
class FieldTable:
    kind: str
    readers: Mapping[str, Reader]
    writers: tuple[Writer, ...]


class FieldTableBuilder:
    """Collect readers and writers, then freeze them into a :class:`FieldTable`."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._readers: dict[str, Reader] = {}
        self._writers: list[Writer] = []

    def field(self, tag: str, attribute: str, codec: ValueCodec, *, write: bool = True) -> "FieldTableBuilder":
        """Map ``tag`` to ``attribute`` using ``codec`` in both directions.

        With ``write=False`` the tag is only accepted on input.
        """

        def read(entity: Any, element: ET.Element, errors: list[FieldError]) -> None:
            setattr(entity, attribute, codec.read(element))

        self.reader(tag, read)
        if write:
            self.writer(lambda writer, entity, context: codec.write(writer, tag, getattr(entity, attribute), context))
        return self

    def reader(self, tag: str, read: Reader) -> "FieldTableBuilder":
        if tag in self._readers:
            raise ValueError(f"Duplicate {self.kind} field {tag!r}")
        self._readers[tag] = read
        return self

    def writer(self, write: Writer) -> "FieldTableBuilder":
        self._writers.append(write)
        return self

    def build(self) -> FieldTable:
        return FieldTable(
            kind=self.kind,
            readers=MappingProxyType(dict(self._readers)),
            writers=tuple(self._writers),
        )


def apply_field(table: FieldTable, entity: Any, element: ET.Element, errors: list[FieldError], owner: Any) -> FieldError | None:
    """Run the reader for ``element``; return the fault if its content was rejected.

    The caller guarantees that ``element.tag`` is known to ``table``.
    """

    try:
        table.readers[element.tag](entity, element, errors)
    except _FIELD_EXCEPTIONS as exc:
        return FieldError(table.kind, owner, element.tag, str(exc) or type(exc).__name__)
    return None


def decode_fields(
    table: FieldTable,
    entity: Any,
    element: ET.Element,
    errors: list[FieldError],
    *,
    owner: Any = None,
) -> None:
    """Apply every recognised child of ``element`` to ``entity`` in document order.

    Faults are appended to ``errors``; a rejected field keeps the value it
    had before and decoding moves on to the next child.
    """

    target = entity if owner is None else owner
    for child in element:
        if child.tag not in table.readers:
            logger.debug("Skipping unknown %s field %s", table.kind, child.tag)
            continue
        error = apply_field(table, entity, child, errors, target)
        if error is not None:
            errors.append(error)


def encode_fields(table: FieldTable, writer: XmlWriter, entity: Any, context: WriteContext) -> None:
    for write in table.writers:
        write(writer, entity, context)


def _identity(owner: Any) -> tuple[Any, str]:
    if owner is None:
        return None, ""
    identifier = getattr(owner, "uuid", None)
    if identifier is None:
        identifier = getattr(owner, "item_id", None)
    return identifier, getattr(owner, "name", "")


def resolve_faults(errors: Iterable[FieldError]) -> tuple[FieldFault, ...]:
    """Turn collected errors into faults naming each owner's final identity."""

    faults = []
    for error in errors:
        entity_id, entity_name = _identity(error.owner)
        fault = FieldFault(error.kind, entity_id, entity_name, error.tag, error.cause)
        logger.debug("Field fault: %s", fault.describe())
        faults.append(fault)
    return tuple(faults)


__all__ = [
    "FieldError",
    "FieldTable",
    "FieldTableBuilder",
    "Reader",
    "Writer",
    "apply_field",
    "decode_fields",
    "encode_fields",
    "resolve_faults",
]
