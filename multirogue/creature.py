"""Creatures that inhabit the dungeon."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

MAX_ARMOUR_CLASS = 10
"""The maximum (weakest) armour class."""

_INITIAL_MAX_HIT_POINTS = 12
_INITIAL_MAX_STRENGTH = 16


@dataclass(frozen=True)
class Position:
    """A position in the dungeon: a level plus coordinates within it."""

    level: int
    x: int
    y: int


@dataclass(eq=False)
class Information:
    """Information about a living occupant of the dungeon.

    Creatures compare and hash by identity, so they can be used as keys.
    """

    name: str
    symbol: str
    pos: Optional[Position] = None
    damage_dice: str = ""
    armour_class: int = MAX_ARMOUR_CLASS
    experience: int = 0
    experience_level: int = 0
    gold: int = 0
    hit_points: int = 0
    max_hit_points: int = 0
    strength: int = 0
    max_strength: int = 0


class Rogue(Information):
    """An adventurer in the dungeon."""

    def __init__(self, name: str) -> None:
        super().__init__(
            name=name,
            symbol="@",
            damage_dice="1d4",
            armour_class=MAX_ARMOUR_CLASS,
            experience_level=1,
            hit_points=_INITIAL_MAX_HIT_POINTS,
            max_hit_points=_INITIAL_MAX_HIT_POINTS,
            strength=_INITIAL_MAX_STRENGTH,
            max_strength=_INITIAL_MAX_STRENGTH,
        )