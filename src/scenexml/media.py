"""Per-face shared media settings and their ``OSMedia`` text encoding."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterable, Iterator

MEDIA_TEXTURE_TYPE = "sl"
MEDIA_VERSION = "0.1"

# Attribute names double as the llsd map keys.
_LLSD_KEYS: tuple[tuple[str, str], ...] = (
    ("alt_image_enable", "boolean"),
    ("auto_loop", "boolean"),
    ("auto_play", "boolean"),
    ("auto_scale", "boolean"),
    ("auto_zoom", "boolean"),
    ("controls", "integer"),
    ("current_url", "string"),
    ("first_click_interact", "boolean"),
    ("height_pixels", "integer"),
    ("home_url", "string"),
    ("perms_control", "integer"),
    ("perms_interact", "integer"),
    ("whitelist", "array"),
    ("whitelist_enable", "boolean"),
    ("width_pixels", "integer"),
)


@dataclass
class MediaEntry:
    """Media settings for one face of a primitive."""

    alt_image_enable: bool = False
    auto_loop: bool = False
    auto_play: bool = False
    auto_scale: bool = False
    auto_zoom: bool = False
    controls: int = 0
    current_url: str = ""
    first_click_interact: bool = False
    height_pixels: int = 0
    home_url: str = ""
    perms_control: int = 7
    perms_interact: int = 7
    whitelist: tuple[str, ...] = field(default_factory=tuple)
    whitelist_enable: bool = False
    width_pixels: int = 0

    def __post_init__(self) -> None:
        self.whitelist = tuple(str(entry) for entry in self.whitelist)


class MediaList:
    """Ordered per-face media entries; faces without media hold ``None``."""

    def __init__(self, entries: Iterable[MediaEntry | None] = ()) -> None:
        self._entries: list[MediaEntry | None] = list(entries)

    def __iter__(self) -> Iterator[MediaEntry | None]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> MediaEntry | None:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaList):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"MediaList({self._entries!r})"

    def to_xml(self) -> str:
        """Return the ``OSMedia`` document describing every face."""

        llsd = ET.Element("llsd")
        array = ET.SubElement(llsd, "array")
        for entry in self._entries:
            if entry is None:
                ET.SubElement(array, "undef")
            else:
                array.append(_entry_to_llsd(entry))

        root = ET.Element("OSMedia", {"type": MEDIA_TEXTURE_TYPE, "version": MEDIA_VERSION})
        data = ET.SubElement(root, "OSData")
        data.text = ET.tostring(llsd, encoding="unicode")
        return ET.tostring(root, encoding="unicode")

    @classmethod
    def from_xml(cls, text: str) -> "MediaList":
        """Parse an ``OSMedia`` document.

        Raises:
            ValueError: If the document is malformed or uses an unknown version.
        """

        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise ValueError(f"Invalid media document: {exc}") from exc

        if root.tag != "OSMedia":
            raise ValueError(f"Expected OSMedia element, found {root.tag!r}")
        version = root.get("version")
        if version != MEDIA_VERSION:
            raise ValueError(f"Unsupported media version {version!r}")

        data = root.find("OSData")
        if data is None or not (data.text or "").strip():
            return cls()

        try:
            llsd = ET.fromstring(data.text)
        except ET.ParseError as exc:
            raise ValueError(f"Invalid media payload: {exc}") from exc

        array = llsd.find("array")
        if array is None:
            raise ValueError("Media payload must contain an array")

        entries: list[MediaEntry | None] = []
        for node in array:
            if node.tag == "undef":
                entries.append(None)
            elif node.tag == "map":
                entries.append(_entry_from_llsd(node))
            else:
                raise ValueError(f"Unexpected media face element {node.tag!r}")
        return cls(entries)


def _entry_to_llsd(entry: MediaEntry) -> ET.Element:
    node = ET.Element("map")
    for key, kind in _LLSD_KEYS:
        ET.SubElement(node, "key").text = key
        value = getattr(entry, key)
        if kind == "array":
            array = ET.SubElement(node, "array")
            for item in value:
                ET.SubElement(array, "string").text = item
        elif kind == "boolean":
            ET.SubElement(node, "boolean").text = "1" if value else "0"
        else:
            ET.SubElement(node, kind).text = str(value)
    return node


def _entry_from_llsd(node: ET.Element) -> MediaEntry:
    kinds = dict(_LLSD_KEYS)
    values: dict[str, object] = {}
    children = list(node)
    for key_node, value_node in zip(children[::2], children[1::2]):
        if key_node.tag != "key":
            raise ValueError("Media map entries must alternate key and value")
        attribute = key_node.text or ""
        kind = kinds.get(attribute)
        if kind is None:
            continue
        text = value_node.text or ""
        if kind == "boolean":
            values[attribute] = text.strip().lower() in ("1", "true")
        elif kind == "integer":
            values[attribute] = int(text.strip() or "0")
        elif kind == "array":
            values[attribute] = tuple(item.text or "" for item in value_node)
        else:
            values[attribute] = text
    return MediaEntry(**values)  # type: ignore[arg-type]


__all__ = ["MediaEntry", "MediaList"]
