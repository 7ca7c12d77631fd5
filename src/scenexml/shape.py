"""Geometric shape parameters of a single primitive."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .media import MediaList
from .primitives import NIL_UUID, Vector3

PCODE_PRIMITIVE = 9


@dataclass
class PrimitiveShape:
    """Flat record of the parameters describing a primitive's geometry.

    ``profile_curve`` packs two values: the low nibble is the profile
    shape and the high nibble the hollow shape. :attr:`profile_shape` and
    :attr:`hollow_shape` expose each half without disturbing the other.

    The sculpt, flexible and light blocks are only meaningful when the
    matching ``*_entry`` flag is set, but their values are always kept so
    a round trip reproduces them exactly.
    """

    profile_curve: int = 1
    texture_entry: bytes | None = None
    extra_params: bytes | None = None
    path_begin: int = 0
    path_curve: int = 16
    path_end: int = 0
    path_radius_offset: int = 0
    path_revolutions: int = 0
    path_scale_x: int = 100
    path_scale_y: int = 100
    path_shear_x: int = 0
    path_shear_y: int = 0
    path_skew: int = 0
    path_taper_x: int = 0
    path_taper_y: int = 0
    path_twist: int = 0
    path_twist_begin: int = 0
    pcode: int = PCODE_PRIMITIVE
    profile_begin: int = 0
    profile_end: int = 0
    profile_hollow: int = 0
    scale: Vector3 = field(default_factory=lambda: Vector3(0.5, 0.5, 0.5))
    state: int = 0

    sculpt_texture: uuid.UUID = NIL_UUID
    sculpt_type: int = 0
    sculpt_data: bytes | None = None

    flexi_softness: int = 0
    flexi_tension: float = 0.0
    flexi_drag: float = 0.0
    flexi_gravity: float = 0.0
    flexi_wind: float = 0.0
    flexi_force_x: float = 0.0
    flexi_force_y: float = 0.0
    flexi_force_z: float = 0.0

    light_color_r: float = 0.0
    light_color_g: float = 0.0
    light_color_b: float = 0.0
    light_color_a: float = 1.0
    light_radius: float = 0.0
    light_cutoff: float = 0.0
    light_falloff: float = 0.0
    light_intensity: float = 1.0

    flexi_entry: bool = False
    light_entry: bool = False
    sculpt_entry: bool = False

    media: MediaList | None = None

    def __post_init__(self) -> None:
        # Zero-length and missing blobs are the same value once persisted.
        for name in ("texture_entry", "extra_params", "sculpt_data"):
            if getattr(self, name) == b"":
                setattr(self, name, None)

    @property
    def profile_shape(self) -> int:
        return self.profile_curve & 0x0F

    @profile_shape.setter
    def profile_shape(self, value: int) -> None:
        self.profile_curve = (int(value) & 0x0F) | (self.profile_curve & 0xF0)

    @property
    def hollow_shape(self) -> int:
        return self.profile_curve & 0xF0

    @hollow_shape.setter
    def hollow_shape(self, value: int) -> None:
        self.profile_curve = (int(value) & 0xF0) | (self.profile_curve & 0x0F)


__all__ = ["PCODE_PRIMITIVE", "PrimitiveShape"]
