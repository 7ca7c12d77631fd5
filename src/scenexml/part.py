"""A single rigid part of a linked scene object."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from .inventory import PERM_ALL, TaskInventory, TaskInventoryItem
from .primitives import NIL_UUID, Color, PrimFlags, Quaternion, Vector3
from .shape import PrimitiveShape

PAY_PRICE_SLOTS = 5
PAY_DEFAULT = -2


def _default_pay_prices() -> list[int]:
    return [PAY_DEFAULT] * PAY_PRICE_SLOTS


@dataclass
class SceneObjectPart:
    """Transform, permissions, appearance and contents of one part.

    ``link_number`` is ``None`` until the part is placed in a group; the
    persisted form writes ``0`` for an unset link number. ``creator_data``
    is ``None`` when the creator is identified by ``creator_id`` only.
    ``media_url`` is ``None`` when the part has no media URL element.
    """

    uuid: UUID = field(default_factory=uuid4)
    local_id: int = 0
    link_number: int | None = None
    parent_id: int = 0

    name: str = "Primitive"
    description: str = ""
    text: str = ""
    color: Color = field(default_factory=Color)
    sit_name: str = ""
    touch_name: str = ""

    group_position: Vector3 = field(default_factory=Vector3)
    offset_position: Vector3 = field(default_factory=Vector3)
    rotation_offset: Quaternion = field(default_factory=Quaternion)
    velocity: Vector3 = field(default_factory=Vector3)
    angular_velocity: Vector3 = field(default_factory=Vector3)
    acceleration: Vector3 = field(default_factory=Vector3)

    owner_id: UUID = NIL_UUID
    creator_id: UUID = NIL_UUID
    creator_data: str | None = None
    group_id: UUID = NIL_UUID
    last_owner_id: UUID = NIL_UUID
    folder_id: UUID = NIL_UUID

    base_mask: int = PERM_ALL
    owner_mask: int = PERM_ALL
    group_mask: int = 0
    everyone_mask: int = 0
    next_owner_mask: int = PERM_ALL
    flags: PrimFlags = PrimFlags(0)

    click_action: int = 0
    material: int = 3
    collision_sound: UUID = NIL_UUID
    collision_sound_volume: float = 0.0

    sit_target_position: Vector3 = field(default_factory=Vector3)
    sit_target_orientation: Quaternion = field(default_factory=Quaternion)
    sit_target_position_ll: Vector3 = field(default_factory=Vector3)
    sit_target_orientation_ll: Quaternion = field(default_factory=Quaternion)

    sale_price: int = 10
    object_sale_type: int = 0
    ownership_cost: int = 0
    category: int = 0
    pay_price: list[int] = field(default_factory=_default_pay_prices)

    allowed_drop: bool = False
    pass_touches: bool = False
    pass_collisions: bool = False
    region_handle: int = 0
    script_access_pin: int = 0
    inventory_serial: int = 0
    creation_date: int = 0
    media_url: str | None = None

    task_inventory: TaskInventory = field(default_factory=TaskInventory)
    shape: PrimitiveShape = field(default_factory=PrimitiveShape)
    texture_animation: bytes | None = None
    particle_system: bytes | None = None

    def __post_init__(self) -> None:
        if self.link_number == 0:
            self.link_number = None
        if self.creator_data == "":
            self.creator_data = None
        if not isinstance(self.flags, PrimFlags):
            self.flags = PrimFlags(self.flags)
        if len(self.pay_price) != PAY_PRICE_SLOTS:
            raise ValueError(f"pay_price must hold exactly {PAY_PRICE_SLOTS} prices")
        self.pay_price = list(self.pay_price)
        if not isinstance(self.task_inventory, TaskInventory):
            items = self.task_inventory
            if isinstance(items, dict):
                items = items.values()
            self.task_inventory = TaskInventory(items)
        for name in ("texture_animation", "particle_system"):
            if getattr(self, name) == b"":
                setattr(self, name, None)

    @property
    def scale(self) -> Vector3:
        """Size of the part; stored on its shape."""

        return self.shape.scale

    @scale.setter
    def scale(self, value: Vector3) -> None:
        self.shape.scale = value

    def add_inventory_item(self, item: TaskInventoryItem) -> None:
        """Place ``item`` in this part's contents."""

        item.parent_part_id = self.uuid
        self.task_inventory.add(item)

    def remove_inventory_item(self, item_id: UUID) -> bool:
        """Remove an item from this part's contents if present."""

        return self.task_inventory.remove(item_id)


__all__ = ["PAY_DEFAULT", "PAY_PRICE_SLOTS", "SceneObjectPart"]
