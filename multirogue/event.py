"""Events exchanged between the server and its clients."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Protocol

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _encode(obj: Any) -> str:
    """Encode compactly, escaping HTML-sensitive characters."""
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    for char, escape in _ESCAPES.items():
        text = text.replace(char, escape)
    return text


class _Payload(Protocol):
    def to_dict(self) -> dict: ...


@dataclass
class Event:
    """Something that happens in the game, like a player moving.

    ``level`` is the dungeon level the event concerns, or None for all
    levels; it is never sent over the wire.
    """

    level: Optional[int]
    name: str
    data: str

    def to_dict(self) -> dict:
        return {"name": self.name, "data": self.data}

    @classmethod
    def from_dict(cls, obj: Any) -> "Event":
        """Build an event from decoded JSON; missing fields are empty."""
        if obj is None:
            return cls(level=None, name="", data="")
        if not isinstance(obj, dict):
            raise ValueError("event must be a JSON object")
        name = obj.get("name", "")
        data = obj.get("data", "")
        name = "" if name is None else name
        data = "" if data is None else data
        if not isinstance(name, str):
            raise ValueError("event name must be a string")
        if not isinstance(data, str):
            raise ValueError("event data must be a string")
        return cls(level=None, name=name, data=data)


def new_event(level: Optional[int], name: str, data: _Payload) -> Event:
    """Create an event whose data is the JSON encoding of ``data``."""
    return Event(level=level, name=name, data=_encode(data.to_dict()))


@dataclass
class DisplayData:
    """Data for a "display" event: a character to draw at a position."""

    x: int
    y: int
    char: str

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "c": self.char}


@dataclass
class LevelData:
    """Data for a "level" event: the visible contents of a level."""

    map: str

    def to_dict(self) -> dict:
        return {"map": self.map}


@dataclass
class MoveData:
    """Data for a "move" event: changes in level and position."""

    dlevel: int = 0
    dx: int = 0
    dy: int = 0

    def to_dict(self) -> dict:
        return {"dlvl": self.dlevel, "dx": self.dx, "dy": self.dy}

    @classmethod
    def from_json(cls, text: str) -> "MoveData":
        """Decode move data; absent fields are zero. Raises ValueError."""
        obj = json.loads(text)
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError("move data must be a JSON object")
        values = {}
        for key, attr in (("dlvl", "dlevel"), ("dx", "dx"), ("dy", "dy")):
            value = obj.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"move field {key!r} must be an integer")
            values[attr] = value
        return cls(**values)


@dataclass
class NotificationData:
    """Data for a "notification" event: a message for the player."""

    message: str

    def to_dict(self) -> dict:
        return {"msg": self.message}


@dataclass
class StatsData:
    """A rogue's current status."""

    map_level: int
    gold: int
    hit_points: int
    max_hit_points: int
    strength: int
    max_strength: int
    armour_class: int
    experience_level: int
    experience: int

    def to_dict(self) -> dict:
        return {
            "mapLvl": self.map_level,
            "gold": self.gold,
            "hp": self.hit_points,
            "maxHp": self.max_hit_points,
            "str": self.strength,
            "maxStr": self.max_strength,
            "arm": self.armour_class,
            "lvl": self.experience_level,
            "exp": self.experience,
        }