"""Read and write scene object groups in the nested and flat XML formats.

The nested ("original") format wraps the root part in ``RootPart`` and
every other part in ``OtherParts/Part``, optionally followed by the
saved script states::

    <SceneObjectGroup>
      <RootPart><SceneObjectPart>...</SceneObjectPart></RootPart>
      <OtherParts>
        <Part><SceneObjectPart>...</SceneObjectPart></Part>
      </OtherParts>
      <GroupScriptStates>
        <SavedScriptState UUID="...">...</SavedScriptState>
      </GroupScriptStates>
    </SceneObjectGroup>

The flat ("xml2") format lists ``SceneObjectPart`` elements directly; the
first one found is the root.

Decoding never raises for bad input. A document without the required
envelope yields a :class:`~scenexml.faults.DecodeResult` carrying a
structural fault; individual fields that cannot be decoded are reported
as field faults while the rest of the group is still built.
"""

from __future__ import annotations

import codecs
import io
import logging
import re
import xml.etree.ElementTree as ET
from typing import IO, Any, Mapping, TextIO
from uuid import UUID
from xml.sax.saxutils import escape

from .faults import DecodeResult, FieldFault, StructuralFault
from .field_table import FieldError, resolve_faults
from .group import SceneObjectGroup
from .options import SerializationOptions, UserNameService, WriteContext
from .part import SceneObjectPart
from .part_codec import PART_TAG, read_part, write_part
from .primitives import NIL_UUID
from .xml_writer import XmlWriter

logger = logging.getLogger(__name__)

Source = str | bytes | IO[str] | IO[bytes]
Options = SerializationOptions | Mapping[str, Any] | None

GROUP_TAG = "SceneObjectGroup"
ROOT_PART_TAG = "RootPart"
OTHER_PARTS_TAG = "OtherParts"
PART_WRAPPER_TAG = "Part"
SCRIPT_STATES_TAG = "GroupScriptStates"
SCRIPT_STATE_TAG = "SavedScriptState"

_DECLARED_ENCODING = re.compile(rb"""\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']""")
_SCRIPT_STATE_SPAN = re.compile(
    r"""<SavedScriptState(?:\s(?:[^>"'/]|/(?!>)|"[^"]*"|'[^']*')*)?(?:/>|>(.*?)</SavedScriptState\s*>)""",
    re.DOTALL,
)


class _StructuralError(Exception):
    """Internal signal that the document lacks a required element."""


def _read_source(source: Source) -> str | bytes:
    if hasattr(source, "read"):
        return source.read()
    return source


def _as_text(document: str | bytes) -> str:
    """Return ``document`` as text for snapshots; undecodable bytes are replaced."""

    if isinstance(document, str):
        return document
    if document.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return document.decode("utf-16", "replace")
    match = _DECLARED_ENCODING.match(document)
    encoding = match.group(1).decode("ascii") if match else "utf-8-sig"
    try:
        return document.decode(encoding, "replace")
    except LookupError:
        return document.decode("utf-8", "replace")


def _parse(document: str | bytes) -> ET.Element:
    # Bytes go to the parser untouched so it honours the declared encoding.
    try:
        return ET.fromstring(document)
    except (ET.ParseError, ValueError) as exc:
        raise _StructuralError(f"Invalid Xml format - {exc}") from exc


def _failure(message: str, snapshot: str) -> DecodeResult:
    logger.error("Deserialization of xml failed with %s. xml was %s", message, snapshot)
    return DecodeResult(error=StructuralFault(message, snapshot))


def _wrapped_part(wrapper: ET.Element, errors: list[FieldError]) -> SceneObjectPart:
    element = wrapper.find(PART_TAG)
    if element is None:
        raise _StructuralError(f"Invalid Xml format - {wrapper.tag} has no {PART_TAG}")
    return read_part(element, errors)


def _link(group: SceneObjectGroup, part: SceneObjectPart) -> None:
    encoded = part.link_number
    try:
        group.add_part(part)
    except ValueError as exc:
        raise _StructuralError(f"Invalid Xml format - {exc}") from exc
    if encoded is not None:
        part.link_number = encoded


def _script_state_markup(element: ET.Element) -> str:
    inner = escape(element.text or "")
    return inner + "".join(ET.tostring(child, encoding="unicode") for child in element)


def _script_state_spans(text: str) -> list[str]:
    return [match.group(1) or "" for match in _SCRIPT_STATE_SPAN.finditer(text)]


def load_script_states(group: SceneObjectGroup, document: ET.Element, text: str | None = None) -> None:
    """Copy every saved script state in ``document`` into ``group``.

    When the ``text`` the document was parsed from is given, each state
    keeps its inner markup exactly as written there. Otherwise the markup
    is rebuilt from the parsed elements. States without a usable ``UUID``
    attribute are skipped.
    """

    elements = list(document.iter(SCRIPT_STATE_TAG))
    spans = _script_state_spans(text) if text is not None else []
    if len(spans) != len(elements):
        spans = [_script_state_markup(element) for element in elements]

    for element, markup in zip(elements, spans):
        raw = element.get("UUID", "")
        try:
            item_id = UUID(raw)
        except ValueError:
            logger.debug("Skipping saved script state with identifier %r", raw)
            continue
        if item_id == NIL_UUID:
            continue
        group.set_script_state(item_id, markup)


def _finish(group: SceneObjectGroup, document: ET.Element, errors: list[FieldError], text: str) -> DecodeResult:
    load_script_states(group, document, text)
    faults = resolve_faults(errors)
    if faults:
        logger.debug("Decoded %s with %d field fault(s)", group.uuid, len(faults))
    return DecodeResult(group=group, faults=faults)


# -- nested format -----------------------------------------------------------


def from_original_xml(source: Source) -> DecodeResult:
    """Decode a group from the nested format."""

    raw = _read_source(source)
    text = _as_text(raw)
    errors: list[FieldError] = []
    try:
        document = _parse(raw)
        root_wrapper = next(document.iter(ROOT_PART_TAG), None)
        if root_wrapper is None:
            raise _StructuralError("Invalid Xml format - no root part")

        group = SceneObjectGroup(_wrapped_part(root_wrapper, errors))
        for wrapper in document.iter(PART_WRAPPER_TAG):
            _link(group, _wrapped_part(wrapper, errors))
    except _StructuralError as exc:
        return _failure(str(exc), text)

    return _finish(group, document, errors, text)


def write_script_states(writer: XmlWriter, group: SceneObjectGroup) -> None:
    """Write the ``GroupScriptStates`` block; nothing when there are no states."""

    if not group.script_states:
        return
    writer.start_element(SCRIPT_STATES_TAG)
    for item_id, state in group.script_states.items():
        writer.start_element(SCRIPT_STATE_TAG, {"UUID": str(item_id)})
        writer.raw(state)
        writer.end_element()
    writer.end_element()


def serialize_script_states(group: SceneObjectGroup) -> str:
    """Return the saved script states as markup for :func:`to_original_xml_with_state`."""

    buffer = io.StringIO()
    write_script_states(XmlWriter(buffer), group)
    return buffer.getvalue()


def _write_original_body(writer: XmlWriter, group: SceneObjectGroup, context: WriteContext) -> None:
    writer.start_element(ROOT_PART_TAG)
    write_part(writer, group.root_part, context)
    writer.end_element()

    writer.start_element(OTHER_PARTS_TAG)
    for part in group.children:
        writer.start_element(PART_WRAPPER_TAG)
        write_part(writer, part, context)
        writer.end_element()
    writer.end_element()


def write_original_xml(
    group: SceneObjectGroup,
    sink: TextIO,
    *,
    include_script_states: bool = True,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> None:
    """Write ``group`` to ``sink`` in the nested format."""

    context = WriteContext.create(options, user_names)
    writer = XmlWriter(sink)
    writer.start_element(GROUP_TAG)
    _write_original_body(writer, group, context)
    if include_script_states:
        write_script_states(writer, group)
    writer.end_element()


def to_original_xml(
    group: SceneObjectGroup,
    *,
    include_script_states: bool = True,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> str:
    buffer = io.StringIO()
    write_original_xml(
        group,
        buffer,
        include_script_states=include_script_states,
        options=options,
        user_names=user_names,
    )
    return buffer.getvalue()


def to_original_xml_with_state(
    group: SceneObjectGroup,
    script_state_xml: str,
    *,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> str:
    """Serialize ``group`` in the nested format with externally captured states.

    The group's own script states are not written; ``script_state_xml`` is
    inserted verbatim before the closing ``SceneObjectGroup`` tag.
    """

    context = WriteContext.create(options, user_names)
    buffer = io.StringIO()
    writer = XmlWriter(buffer)
    writer.start_element(GROUP_TAG)
    _write_original_body(writer, group, context)
    writer.raw(script_state_xml)
    writer.end_element()
    return buffer.getvalue()


# -- flat format -------------------------------------------------------------


def from_xml2(source: Source) -> DecodeResult:
    """Decode a group from the flat format."""

    raw = _read_source(source)
    text = _as_text(raw)
    errors: list[FieldError] = []
    try:
        document = _parse(raw)
        elements = list(document.iter(PART_TAG))
        if not elements:
            raise _StructuralError(f"Invalid Xml format - no {PART_TAG} nodes")

        group = SceneObjectGroup(read_part(elements[0], errors))
        for element in elements[1:]:
            _link(group, read_part(element, errors))
    except _StructuralError as exc:
        return _failure(str(exc), text)

    return _finish(group, document, errors, text)


def write_xml2(
    group: SceneObjectGroup,
    sink: TextIO,
    *,
    include_script_states: bool = False,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> None:
    """Write ``group`` to ``sink`` in the flat format."""

    context = WriteContext.create(options, user_names)
    writer = XmlWriter(sink)
    writer.start_element(GROUP_TAG)
    write_part(writer, group.root_part, context)
    writer.start_element(OTHER_PARTS_TAG)
    for part in group.children:
        write_part(writer, part, context)
    writer.end_element()
    if include_script_states:
        write_script_states(writer, group)
    writer.end_element()


def to_xml2(
    group: SceneObjectGroup,
    *,
    include_script_states: bool = False,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> str:
    buffer = io.StringIO()
    write_xml2(
        group,
        buffer,
        include_script_states=include_script_states,
        options=options,
        user_names=user_names,
    )
    return buffer.getvalue()


def part_to_xml2(
    part: SceneObjectPart,
    *,
    options: Options = None,
    user_names: UserNameService | None = None,
) -> str:
    """Serialize a single part as a standalone ``SceneObjectPart`` element."""

    context = WriteContext.create(options, user_names)
    buffer = io.StringIO()
    write_part(XmlWriter(buffer), part, context)
    return buffer.getvalue()


def part_from_xml2(source: Source) -> tuple[SceneObjectPart, tuple[FieldFault, ...]]:
    """Decode a single ``SceneObjectPart`` element.

    Raises:
        ValueError: If the document is not well formed or holds no part.
    """

    try:
        document = _parse(_read_source(source))
    except _StructuralError as exc:
        raise ValueError(str(exc)) from exc
    element = document if document.tag == PART_TAG else document.find(f".//{PART_TAG}")
    if element is None:
        raise ValueError(f"Invalid Xml format - no {PART_TAG} nodes")

    errors: list[FieldError] = []
    part = read_part(element, errors)
    return part, resolve_faults(errors)


__all__ = [
    "from_original_xml",
    "from_xml2",
    "load_script_states",
    "part_from_xml2",
    "part_to_xml2",
    "serialize_script_states",
    "to_original_xml",
    "to_original_xml_with_state",
    "to_xml2",
    "write_original_xml",
    "write_script_states",
    "write_xml2",
]
