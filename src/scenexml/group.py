"""A linked set of parts persisted as one scene object."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .part import SceneObjectPart


@dataclass
class SceneObjectGroup:
    """One root part plus its linked child parts.

    Children keep the order in which they were added. A child added with
    an unset ``link_number`` receives the smallest positive number no
    linked part uses yet; an explicit link number is left untouched.

    ``script_states`` maps script item identifiers to the raw saved state
    markup for that script. The codec stores it verbatim and never looks
    inside.
    """

    root_part: SceneObjectPart
    children: list[SceneObjectPart] = field(default_factory=list)
    script_states: dict[UUID, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        initial = list(self.children)
        self.children = []
        for part in initial:
            self.add_part(part)

    @property
    def name(self) -> str:
        return self.root_part.name

    @property
    def uuid(self) -> UUID:
        return self.root_part.uuid

    @property
    def parts(self) -> list[SceneObjectPart]:
        """Return every part, root first."""

        return [self.root_part, *self.children]

    @property
    def part_count(self) -> int:
        return 1 + len(self.children)

    def add_part(self, part: SceneObjectPart) -> SceneObjectPart:
        """Link ``part`` into the group.

        Raises:
            ValueError: If a part with the same identifier is already linked.
        """

        if self.get_part(part.uuid) is not None:
            raise ValueError(f"Part {part.uuid} is already linked into {self.uuid}")

        if part.link_number is None:
            part.link_number = self._free_link_number()
        self.children.append(part)
        return part

    def _free_link_number(self) -> int:
        taken = {part.link_number for part in self.parts}
        number = 1
        while number in taken:
            number += 1
        return number

    def get_part(self, part_id: UUID) -> SceneObjectPart | None:
        """Return the linked part with ``part_id`` if present."""

        for part in self.parts:
            if part.uuid == part_id:
                return part
        return None

    def set_script_state(self, item_id: UUID, state: str) -> None:
        """Remember the saved state markup for the script ``item_id``."""

        self.script_states[item_id] = state


__all__ = ["SceneObjectGroup"]
