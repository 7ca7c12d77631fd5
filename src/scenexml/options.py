"""Serialization options and the user-name lookup collaborator."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .primitives import NIL_UUID

OLD_GUIDS = "old-guids"
HOME = "home"
WIPE_OWNERS = "wipe-owners"


class UserNameService(Protocol):
    """Resolve a user identifier to a display name."""

    def resolve_display_name(self, user_id: UUID) -> str:
        ...


class SerializationOptions(BaseModel):
    """Options recognised by the scene object writers.

    * ``old_guids`` writes identifiers under the legacy ``Guid`` tag.
    * ``home`` is the origin used to synthesize creator attribution for
      entities that carry none.
    * ``wipe_owners`` writes owner and last-owner identifiers as the nil
      identifier. The original owners cannot be recovered from the output.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    old_guids: bool = Field(default=False, alias=OLD_GUIDS)
    home: str | None = None
    wipe_owners: bool = Field(default=False, alias=WIPE_OWNERS)

    @field_validator("home")
    @classmethod
    def _normalise_home(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SerializationOptions":
        """Build options from a legacy option dictionary.

        The flags are switched on by the presence of their key, whatever
        value it maps to.
        """

        home = options.get(HOME)
        return cls(
            old_guids=OLD_GUIDS in options,
            home=str(home) if home is not None else None,
            wipe_owners=WIPE_OWNERS in options,
        )


class LazyUserNameService:
    """Defer looking up the name service until a name is first needed.

    The backing service is resolved at most once; concurrent first calls
    may both run ``factory`` but only one result is kept.
    """

    def __init__(self, factory: Callable[[], UserNameService]) -> None:
        self._factory = factory
        self._service: UserNameService | None = None
        self._lock = threading.Lock()

    @property
    def resolved(self) -> bool:
        return self._service is not None

    def resolve_display_name(self, user_id: UUID) -> str:
        service = self._service
        if service is None:
            candidate = self._factory()
            with self._lock:
                if self._service is None:
                    self._service = candidate
                service = self._service
        return service.resolve_display_name(user_id)


class JsonUserNameService:
    """Name service backed by a JSON object mapping identifiers to names."""

    def __init__(self, names: Mapping[UUID, str]) -> None:
        self._names: dict[UUID, str] = dict(names)

    @classmethod
    def from_file(cls, path: Path) -> "JsonUserNameService":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("User name file must contain a JSON object")
        names: dict[UUID, str] = {}
        for key, value in payload.items():
            if not isinstance(value, str):
                raise ValueError(f"User name for {key!r} must be a string")
            names[UUID(key)] = value
        return cls(names)

    def resolve_display_name(self, user_id: UUID) -> str:
        return self._names.get(user_id, "Unknown User")


@dataclass(frozen=True)
class WriteContext:
    """Options plus collaborators handed to every field writer."""

    options: SerializationOptions = field(default_factory=SerializationOptions)
    user_names: UserNameService | None = None

    def __post_init__(self) -> None:
        if self.options.home is not None and self.user_names is None:
            raise ValueError("The 'home' option requires a user name service")

    @classmethod
    def create(
        cls,
        options: SerializationOptions | Mapping[str, Any] | None = None,
        user_names: UserNameService | None = None,
    ) -> "WriteContext":
        if options is None:
            resolved = SerializationOptions()
        elif isinstance(options, SerializationOptions):
            resolved = options
        else:
            resolved = SerializationOptions.from_mapping(options)
        return cls(options=resolved, user_names=user_names)

    @property
    def uuid_tag(self) -> str:
        return "Guid" if self.options.old_guids else "UUID"

    def owner(self, owner_id: UUID) -> UUID:
        """Return the owner identifier to persist for ``owner_id``."""

        return NIL_UUID if self.options.wipe_owners else owner_id

    def creator_data(self, creator_id: UUID, creator_data: str | None) -> str | None:
        """Return the creator attribution to persist, or ``None`` to omit it."""

        if creator_data:
            return creator_data
        if self.options.home is None:
            return None
        assert self.user_names is not None
        name = self.user_names.resolve_display_name(creator_id)
        return f"{self.options.home};{name}"


__all__ = [
    "HOME",
    "JsonUserNameService",
    "LazyUserNameService",
    "OLD_GUIDS",
    "SerializationOptions",
    "UserNameService",
    "WIPE_OWNERS",
    "WriteContext",
]
