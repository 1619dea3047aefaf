import json
import random

from multirogue.creature import Position, Rogue
from multirogue.dungeon import (
    BREADTH,
    FLOOR,
    LENGTH,
    NUM_LEVELS,
    STAIRCASE,
    Dungeon,
    Tile,
    new_level,
)
from multirogue.event import MoveData


def _relocate(dungeon, rogue, pos):
    old = rogue.pos
    dungeon.levels[old.level][old.y][old.x].occupant = None
    dungeon.levels[pos.level][pos.y][pos.x].occupant = rogue
    rogue.pos = pos


def _staircase(dungeon, level):
    return next(
        tile for row in dungeon.levels[level] for tile in row if tile.terrain == STAIRCASE
    )


def _added(seed=1, name="Alice"):
    dungeon = Dungeon(random.Random(seed))
    rogue = Rogue(name)
    dungeon.add(rogue)
    return dungeon, rogue


def test_tile_symbol_and_str():
    tile = Tile(x=0, y=0, terrain=FLOOR)
    assert tile.symbol() == FLOOR
    assert str(tile) == FLOOR
    tile.occupant = Rogue("Alice")
    assert tile.symbol() == "@"
    assert str(tile) == "@"


def test_new_level_shape_and_single_staircase():
    level = new_level(random.Random(3))
    assert len(level) == BREADTH
    assert all(len(row) == LENGTH for row in level)
    assert all(tile.x == x and tile.y == y for y, row in enumerate(level) for x, tile in enumerate(row))
    terrains = [tile.terrain for row in level for tile in row]
    assert terrains.count(STAIRCASE) == 1
    assert terrains.count(FLOOR) == LENGTH * BREADTH - 1


def test_dungeon_has_all_levels():
    dungeon = Dungeon(random.Random(0))
    assert len(dungeon.levels) == NUM_LEVELS


def test_add_places_rogue_on_floor_of_first_level():
    dungeon = Dungeon(random.Random(5))
    rogue = Rogue("Alice")
    send, broadcast = dungeon.add(rogue)
    assert rogue.pos.level == 0
    assert dungeon.levels[0][rogue.pos.y][rogue.pos.x].terrain == FLOOR
    assert [e.name for e in send] == ["level", "stats"]
    assert [e.name for e in broadcast] == ["display", "notification"]
    assert json.loads(broadcast[1].data) == {"msg": "Alice has entered the dungeon."}
    display = json.loads(broadcast[0].data)
    assert display == {"x": rogue.pos.x, "y": rogue.pos.y, "c": "@"}
    assert broadcast[0].level == 0


def test_add_stats_event():
    dungeon = Dungeon(random.Random(5))
    rogue = Rogue("Alice")
    send, _ = dungeon.add(rogue)
    stats = json.loads(send[1].data)
    assert stats["mapLvl"] == 1
    assert stats["arm"] == 0
    assert stats["hp"] == stats["maxHp"] == rogue.max_hit_points
    assert stats["str"] == stats["maxStr"] == rogue.max_strength


def test_render_map():
    dungeon, rogue = _added()
    lines = dungeon.render_map(rogue).split("\n")
    assert lines[-1] == ""
    rows = lines[:-1]
    assert len(rows) == BREADTH
    assert all(len(row) == LENGTH for row in rows)
    assert rows[rogue.pos.y][rogue.pos.x] == "@"
    text = "".join(rows)
    assert text.count("@") == 1
    assert text.count(STAIRCASE) == 1


def test_level_event_holds_map():
    dungeon = Dungeon(random.Random(8))
    rogue = Rogue("Alice")
    send, _ = dungeon.add(rogue)
    assert json.loads(send[0].data) == {"map": dungeon.render_map(rogue)}


def test_move_on_same_level():
    dungeon, rogue = _added()
    _relocate(dungeon, rogue, Position(level=4, x=10, y=10))
    send, broadcast = dungeon.move(rogue, MoveData(dx=1))
    assert send == []
    assert rogue.pos == Position(level=4, x=11, y=10)
    old, new = (json.loads(e.data) for e in broadcast)
    assert old == {"x": 10, "y": 10, "c": dungeon.levels[4][10][10].terrain}
    assert new == {"x": 11, "y": 10, "c": "@"}
    assert dungeon.levels[4][10][10].occupant is None


def test_move_off_edge_does_nothing():
    dungeon, rogue = _added()
    _relocate(dungeon, rogue, Position(level=3, x=0, y=0))
    assert dungeon.move(rogue, MoveData(dx=-1)) == ([], [])
    assert dungeon.move(rogue, MoveData(dy=-1)) == ([], [])
    assert rogue.pos == Position(3, 0, 0)


def test_move_in_place_does_nothing():
    dungeon, rogue = _added()
    pos = rogue.pos
    assert dungeon.move(rogue, MoveData()) == ([], [])
    assert rogue.pos == pos


def test_move_into_other_rogue_is_blocked():
    dungeon, alice = _added()
    bob = Rogue("Bob")
    dungeon.add(bob)
    _relocate(dungeon, alice, Position(level=2, x=5, y=5))
    _relocate(dungeon, bob, Position(level=2, x=6, y=5))
    assert dungeon.move(alice, MoveData(dx=1)) == ([], [])
    assert alice.pos == Position(2, 5, 5)


def test_descend_requires_staircase():
    dungeon, rogue = _added()
    pos = rogue.pos
    assert dungeon.move(rogue, MoveData(dlevel=1)) == ([], [])
    assert rogue.pos == pos


def test_descend_from_staircase():
    dungeon, rogue = _added()
    stairs = _staircase(dungeon, 0)
    _relocate(dungeon, rogue, Position(level=0, x=stairs.x, y=stairs.y))
    send, broadcast = dungeon.move(rogue, MoveData(dlevel=1))
    assert rogue.pos == Position(level=1, x=stairs.x, y=stairs.y)
    assert [e.name for e in send] == ["level", "stats"]
    assert json.loads(send[1].data)["mapLvl"] == 2
    assert [e.level for e in broadcast] == [0, 1]
    assert json.loads(broadcast[0].data)["c"] == STAIRCASE
    assert json.loads(broadcast[1].data)["c"] == "@"


def test_ascend_is_not_possible():
    dungeon, rogue = _added()
    stairs = _staircase(dungeon, 1)
    _relocate(dungeon, rogue, Position(level=1, x=stairs.x, y=stairs.y))
    assert dungeon.move(rogue, MoveData(dlevel=-1)) == ([], [])
    assert rogue.pos.level == 1


def test_remove_clears_tile():
    dungeon, rogue = _added(name="Bob")
    send, broadcast = dungeon.remove(rogue)
    assert send == []
    assert json.loads(broadcast[1].data) == {"msg": "Bob has left the dungeon."}
    assert json.loads(broadcast[0].data)["c"] == FLOOR
    assert "@" not in dungeon.render_map(rogue)