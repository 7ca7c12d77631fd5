"""Test configuration for the scene object XML project."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from typing import Callable
from uuid import UUID

import pytest

from scenexml import (
    Color,
    MediaEntry,
    MediaList,
    PrimFlags,
    PrimitiveShape,
    Quaternion,
    SceneObjectGroup,
    SceneObjectPart,
    TaskInventoryItem,
    Vector3,
)

OWNER = UUID("11111111-1111-1111-1111-111111111111")
CREATOR = UUID("22222222-2222-2222-2222-222222222222")
LAST_OWNER = UUID("33333333-3333-3333-3333-333333333333")
GROUP = UUID("44444444-4444-4444-4444-444444444444")
SCRIPT_ITEM = UUID("55555555-5555-5555-5555-555555555555")


class RecordingNameService:
    """Name service that remembers every lookup it serves."""

    def __init__(self, names: dict[UUID, str] | None = None) -> None:
        self.names = dict(names or {})
        self.calls: list[UUID] = []

    def resolve_display_name(self, user_id: UUID) -> str:
        self.calls.append(user_id)
        return self.names.get(user_id, "Unknown User")


@pytest.fixture
def name_service() -> RecordingNameService:
    return RecordingNameService({CREATOR: "Ada Builder"})


def build_item(name: str = "Greeter", **overrides) -> TaskInventoryItem:
    values = dict(
        name=name,
        description="says hello",
        asset_id=UUID("66666666-6666-6666-6666-666666666666"),
        owner_id=OWNER,
        creator_id=CREATOR,
        last_owner_id=LAST_OWNER,
        group_id=GROUP,
        inv_type=10,
        type=10,
        creation_date=1262304000,
        flags=0x100,
        owner_changed=True,
    )
    values.update(overrides)
    return TaskInventoryItem(**values)


def build_part(name: str = "Primitive", **overrides) -> SceneObjectPart:
    shape = PrimitiveShape(
        profile_curve=0x21,
        texture_entry=b"\x00\x01\x02texture",
        path_twist=-20,
        path_taper_x=15,
        scale=Vector3(1.0, 2.0, 0.5),
        sculpt_entry=False,
        light_entry=True,
        light_color_r=0.25,
        light_radius=10.0,
        media=MediaList([None, MediaEntry(current_url="http://example.com/", auto_play=True)]),
    )
    values = dict(
        name=name,
        description=f"{name} description",
        owner_id=OWNER,
        creator_id=CREATOR,
        last_owner_id=LAST_OWNER,
        group_id=GROUP,
        local_id=720,
        group_position=Vector3(128.0, 128.0, 22.5),
        offset_position=Vector3(0.5, 0.0, 1.25),
        rotation_offset=Quaternion(0.0, 0.0, 0.7071067811865476, 0.7071067811865476),
        color=Color(255, 128, 0, 255),
        text="hover text",
        flags=PrimFlags.Touch | PrimFlags.Phantom | PrimFlags.Scripted,
        sale_price=25,
        pay_price=[-2, 5, 10, 20, -1],
        region_handle=1099511628032000,
        collision_sound_volume=0.5,
        creation_date=1262304000,
        shape=shape,
        particle_system=b"\xff\x00particles",
    )
    values.update(overrides)
    return SceneObjectPart(**values)


@pytest.fixture
def make_item() -> Callable[..., TaskInventoryItem]:
    return build_item


@pytest.fixture
def make_part() -> Callable[..., SceneObjectPart]:
    return build_part


@pytest.fixture
def linked_group() -> SceneObjectGroup:
    """Root part plus two children, with contents and a saved script state."""

    root = build_part("Root")
    root.add_inventory_item(build_item("Greeter", item_id=SCRIPT_ITEM))
    group = SceneObjectGroup(root)
    group.add_part(build_part("Left arm"))
    group.add_part(build_part("Right arm", media_url="http://example.com/media"))
    group.set_script_state(
        SCRIPT_ITEM,
        '<State UUID="55555555-5555-5555-5555-555555555555"><Running>True</Running></State>',
    )
    return group
