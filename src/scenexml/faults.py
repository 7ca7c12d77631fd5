"""Fault records produced while decoding scene objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .group import SceneObjectGroup

PART = "part"
SHAPE = "shape"
INVENTORY_ITEM = "inventory item"
SCRIPT_STATE = "script state"


@dataclass(frozen=True)
class FieldFault:
    """A single field that could not be decoded.

    The containing entity is still produced; only the named field keeps
    its default value.
    """

    entity_kind: str
    entity_id: UUID | None
    entity_name: str
    tag: str
    cause: str

    def describe(self) -> str:
        return (
            f"{self.entity_kind} '{self.entity_name}' ({self.entity_id}): "
            f"field {self.tag}: {self.cause}"
        )


@dataclass(frozen=True)
class StructuralFault:
    """A required envelope element was missing, so nothing was decoded."""

    message: str
    snapshot: str


class SceneObjectDecodeError(ValueError):
    """Raised by :meth:`DecodeResult.unwrap` when decoding failed."""

    def __init__(self, fault: StructuralFault) -> None:
        super().__init__(fault.message)
        self.fault = fault


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one scene object document.

    Exactly one of ``group`` and ``error`` is set. ``faults`` lists the
    field-level problems met on the way; it is empty for a clean decode.
    """

    group: SceneObjectGroup | None = None
    faults: tuple[FieldFault, ...] = field(default_factory=tuple)
    error: StructuralFault | None = None

    @property
    def ok(self) -> bool:
        return self.group is not None

    def unwrap(self) -> SceneObjectGroup:
        """Return the decoded group or raise :class:`SceneObjectDecodeError`."""

        if self.group is None:
            assert self.error is not None
            raise SceneObjectDecodeError(self.error)
        return self.group


__all__ = [
    "DecodeResult",
    "FieldFault",
    "INVENTORY_ITEM",
    "PART",
    "SCRIPT_STATE",
    "SHAPE",
    "SceneObjectDecodeError",
    "StructuralFault",
]
