"""The dungeon and its levels."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from multirogue.creature import MAX_ARMOUR_CLASS, Information, Position, Rogue
from multirogue.event import (
    DisplayData,
    Event,
    LevelData,
    MoveData,
    NotificationData,
    StatsData,
    new_event,
)

FLOOR = "."
"""The floor of a room."""
STAIRCASE = "%"
"""A staircase leading to adjacent levels."""

LENGTH = 80
BREADTH = 22
NUM_LEVELS = 21

Level = List[List["Tile"]]
Events = Tuple[List[Event], List[Event]]


@dataclass
class Tile:
    """A single position in a dungeon level."""

    x: int
    y: int
    terrain: str
    occupant: Optional[Information] = None

    def symbol(self) -> str:
        """The character for the visible contents of the tile."""
        if self.occupant is not None:
            return self.occupant.symbol
        return self.terrain

    def __str__(self) -> str:
        return self.symbol()


def new_level(rng: Optional[random.Random] = None) -> Level:
    """Generate a level of floor with one staircase at a random spot."""
    rng = rng if rng is not None else random.Random()
    tiles = [[Tile(x=x, y=y, terrain=FLOOR) for x in range(LENGTH)] for y in range(BREADTH)]
    x, y = rng.randrange(LENGTH), rng.randrange(BREADTH)
    tiles[y][x].terrain = STAIRCASE
    return tiles


class Dungeon:
    """A set of levels holding rooms, passages and creatures.

    Operations return a pair of event lists: those to send to the acting
    rogue only and those to broadcast to everyone.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.levels: List[Level] = [new_level(self._rng) for _ in range(NUM_LEVELS)]

    def add(self, rogue: Rogue) -> Events:
        """Place a rogue at a random spot on the first level."""
        self._occupy(rogue, self._random_spawn_pos(0))
        send = [self._level_event(rogue), self._stats_event(rogue)]
        broadcast = [
            self._display_event(rogue.pos),
            self._notification_event(f"{rogue.name} has entered the dungeon."),
        ]
        return send, broadcast

    def remove(self, rogue: Rogue) -> Events:
        """Take a rogue out of the dungeon."""
        self._unoccupy(rogue)
        return [], [
            self._display_event(rogue.pos),
            self._notification_event(f"{rogue.name} has left the dungeon."),
        ]

    def move(self, rogue: Rogue, data: MoveData) -> Events:
        """Move a rogue; an impossible move does nothing."""
        pos = rogue.pos
        # Changing level is only possible on a staircase.
        if data.dlevel != 0 and self._tile(pos).terrain != STAIRCASE:
            return [], []
        # Ascending needs the Amulet of Yendor, which cannot be found yet.
        if data.dlevel < 0:
            return [], []

        new_pos = Position(level=pos.level + data.dlevel, x=pos.x + data.dx, y=pos.y + data.dy)
        if not self._is_valid(new_pos):
            return [], []

        self._unoccupy(rogue)
        self._occupy(rogue, new_pos)

        send: List[Event] = []
        if new_pos.level != pos.level:
            send = [self._level_event(rogue), self._stats_event(rogue)]
        return send, [self._display_event(pos), self._display_event(rogue.pos)]

    def render_map(self, rogue: Rogue) -> str:
        """The visible contents of the rogue's current level, one line per row."""
        return "".join(
            "".join(str(tile) for tile in row) + "\n" for row in self.levels[rogue.pos.level]
        )

    def _tile(self, pos: Position) -> Tile:
        return self.levels[pos.level][pos.y][pos.x]

    def _display_event(self, pos: Position) -> Event:
        return new_event(
            pos.level, "display", DisplayData(x=pos.x, y=pos.y, char=str(self._tile(pos)))
        )

    def _level_event(self, rogue: Rogue) -> Event:
        return new_event(None, "level", LevelData(map=self.render_map(rogue)))

    @staticmethod
    def _notification_event(message: str) -> Event:
        return new_event(None, "notification", NotificationData(message=message))

    @staticmethod
    def _stats_event(rogue: Rogue) -> Event:
        return new_event(
            None,
            "stats",
            StatsData(
                map_level=rogue.pos.level + 1,
                gold=rogue.gold,
                hit_points=rogue.hit_points,
                max_hit_points=rogue.max_hit_points,
                strength=rogue.strength,
                max_strength=rogue.max_strength,
                armour_class=MAX_ARMOUR_CLASS - rogue.armour_class,
                experience_level=rogue.experience_level,
                experience=rogue.experience,
            ),
        )

    def _occupy(self, creature: Information, pos: Position) -> None:
        self._tile(pos).occupant = creature
        creature.pos = pos

    def _unoccupy(self, creature: Information) -> None:
        self._tile(creature.pos).occupant = None

    def _random_spawn_pos(self, level: int) -> Position:
        tiles = self.levels[level]
        while True:
            x = self._rng.randrange(len(tiles[0]))
            y = self._rng.randrange(len(tiles))
            if tiles[y][x].symbol() == FLOOR:
                return Position(level=level, x=x, y=y)

    def _is_valid(self, pos: Position) -> bool:
        if not 0 <= pos.level < len(self.levels):
            return False
        level = self.levels[pos.level]
        if not 0 <= pos.y < len(level):
            return False
        if not 0 <= pos.x < len(level[pos.y]):
            return False
        return self._tile(pos).symbol() in (FLOOR, STAIRCASE)