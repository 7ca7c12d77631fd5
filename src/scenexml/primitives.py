"""Value types shared by the scene object model."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass

NIL_UUID = uuid.UUID(int=0)


@dataclass(frozen=True)
class Vector3:
    """Three component vector used for positions, velocities and scales."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    """Rotation stored as ``(x, y, z, w)``; the default is the identity."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Color:
    """Hover-text colour with byte-sized channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def __post_init__(self) -> None:
        for channel in ("r", "g", "b", "a"):
            value = getattr(self, channel)
            if not isinstance(value, int):
                raise TypeError(f"colour channel {channel} must be an int, got {type(value)!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"colour channel {channel} must be within 0..255")


class PrimFlags(enum.IntFlag):
    """Object flag bits. Member names are the persisted names."""

    Physics = 0x1
    CreateSelected = 0x2
    ObjectModify = 0x4
    ObjectCopy = 0x8
    ObjectAnyOwner = 0x10
    ObjectYouOwner = 0x20
    Scripted = 0x40
    Touch = 0x80
    ObjectMove = 0x100
    Money = 0x200
    Phantom = 0x400
    InventoryEmpty = 0x800
    JointHinge = 0x1000
    JointP2P = 0x2000
    JointLP2P = 0x4000
    JointWheel = 0x8000
    AllowInventoryDrop = 0x10000
    ObjectTransfer = 0x20000
    ObjectGroupOwned = 0x40000
    ObjectYouOfficer = 0x80000
    CameraDecoupled = 0x100000
    AnimSource = 0x200000
    CameraSource = 0x400000
    CastShadows = 0x800000
    DieAtEdge = 0x1000000
    ReturnAtEdge = 0x2000000
    Sandbox = 0x4000000
    Flying = 0x8000000
    ObjectOwnerModify = 0x10000000
    TemporaryOnRez = 0x20000000
    Temporary = 0x40000000
    ZlibCompressed = 0x80000000


class ProfileShape(enum.IntEnum):
    """Profile cross-section, stored in the low nibble of the profile curve."""

    Circle = 0
    Square = 1
    IsometricTriangle = 2
    EquilateralTriangle = 3
    RightTriangle = 4
    HalfCircle = 5


class HollowShape(enum.IntEnum):
    """Hollow cut-out shape, stored in the high nibble of the profile curve."""

    Same = 0x00
    Circle = 0x10
    Square = 0x20
    Triangle = 0x30


__all__ = [
    "Color",
    "HollowShape",
    "NIL_UUID",
    "PrimFlags",
    "ProfileShape",
    "Quaternion",
    "Vector3",
]
