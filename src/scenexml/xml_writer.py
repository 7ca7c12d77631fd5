"""Streaming XML output sink used by the scene object writers."""

from __future__ import annotations

import base64
import logging
import re
from typing import Mapping, TextIO
from xml.sax.saxutils import escape, quoteattr

logger = logging.getLogger(__name__)

# Characters XML 1.0 cannot carry, even as character references.
_FORBIDDEN_CHARACTERS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
# A bare carriage return would be folded into a newline by any reader.
_TEXT_ENTITIES = {"\r": "&#13;"}


def _clean(value: str) -> str:
    cleaned = _FORBIDDEN_CHARACTERS.sub("", value)
    if len(cleaned) != len(value):
        logger.debug("Dropped %d character(s) XML cannot represent", len(value) - len(cleaned))
    return cleaned


class XmlWriter:
    """Write elements straight to a text stream.

    Elements with no content are closed as ``<Name />``. No XML
    declaration is emitted, so documents can be embedded in larger ones.
    Characters that XML 1.0 forbids are dropped from text and attribute
    values; carriage returns are written as character references.
    """

    def __init__(self, sink: TextIO) -> None:
        self._sink = sink
        self._open: list[str] = []
        self._tag_pending = False

    def start_element(self, name: str, attributes: Mapping[str, str] | None = None) -> None:
        self._close_pending_tag()
        self._sink.write(f"<{name}")
        for key, value in (attributes or {}).items():
            self._sink.write(f" {key}={quoteattr(_clean(value))}")
        self._open.append(name)
        self._tag_pending = True

    def end_element(self) -> None:
        if not self._open:
            raise RuntimeError("end_element called with no open element")
        name = self._open.pop()
        if self._tag_pending:
            self._sink.write(" />")
            self._tag_pending = False
        else:
            self._sink.write(f"</{name}>")

    def text(self, value: str) -> None:
        value = _clean(value)
        if not value:
            return
        self._close_pending_tag()
        self._sink.write(escape(value, _TEXT_ENTITIES))

    def raw(self, markup: str) -> None:
        """Write already serialized markup without escaping."""

        if not markup:
            return
        self._close_pending_tag()
        self._sink.write(markup)

    def element_string(self, name: str, value: str) -> None:
        self.start_element(name)
        self.text(value)
        self.end_element()

    def element_base64(self, name: str, data: bytes | None) -> None:
        """Write ``data`` as base64; ``None`` is written as an empty element."""

        self.start_element(name)
        self.text(base64.b64encode(data or b"").decode("ascii"))
        self.end_element()

    def close(self) -> None:
        """Close every element that is still open."""

        while self._open:
            self.end_element()

    def _close_pending_tag(self) -> None:
        if self._tag_pending:
            self._sink.write(">")
            self._tag_pending = False


__all__ = ["XmlWriter"]
