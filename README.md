# multirogue

A multiplayer dungeon crawler served over WebSockets. Several players
connect at once, each controlling a rogue (`@`) in a shared 21-level
dungeon. Moves arrive as JSON events over a WebSocket, and every player on
the same level is told when a cell of the map changes.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

```
multirogue --port 8080
```

When `--port` is not given, the port comes from the `PORT` environment
variable, and failing that defaults to 8080. `multirogue --version` prints
the installed version. If the server cannot bind its port, the error is
logged and the command exits with status 1.

The server has two kinds of route:

- `/ws` – the WebSocket endpoint. The player's name is taken from the
  `name` query parameter, for example `ws://localhost:8080/ws?name=Alice`.
  A request whose `Origin` header names a different host is refused with
  403, and a plain HTTP request to this route gets 400.
- everything else – static files from the `./public` directory. A request
  for a directory serves its `index.html`; paths that do not exist or lead
  outside the directory get 404.

## Protocol

Clients send JSON events of the form:

```json
{"name": "move", "data": "{\"dlvl\": 0, \"dx\": 1, \"dy\": 0}"}
```

`move` is the only event the server acts on; other names are logged and
ignored. A message that is not valid JSON ends the connection. Absent
fields in the move data count as zero.

A move succeeds only if the target cell lies inside the level and shows
floor (`.`) or a staircase (`%`), so rogues cannot step onto each other.
`dlvl` changes the dungeon level and is honoured only while standing on a
staircase; only descending (a positive `dlvl`) is allowed. A move that is
not possible is silently ignored.

The server sends JSON arrays of events, batching whatever has queued up.
Each event has a `name` and a `data` string holding JSON:

- `level` – the full map of the player's current level (`{"map": ...}`),
  sent to that player on joining and on changing level
- `stats` – the player's status (`mapLvl`, `gold`, `hp`, `maxHp`, `str`,
  `maxStr`, `arm`, `lvl`, `exp`), sent alongside `level`
- `display` – a single changed cell (`{"x": ..., "y": ..., "c": ...}`),
  sent to every player on that level
- `notification` – a message to every player, such as
  `"Alice has entered the dungeon."` or `"Alice has left the dungeon."`
  (`{"msg": ...}`)

A client that falls 256 queued events behind is disconnected.

## Using the library

```python
import random

from multirogue.creature import Rogue
from multirogue.dungeon import Dungeon
from multirogue.event import MoveData

dungeon = Dungeon(random.Random(1))
rogue = Rogue("Alice")
send, broadcast = dungeon.add(rogue)
send, broadcast = dungeon.move(rogue, MoveData(dlevel=0, dx=1, dy=0))
print(dungeon.render_map(rogue))
```

`Dungeon.add`, `Dungeon.remove` and `Dungeon.move` each return a pair of
event lists: events for the acting rogue alone and events to broadcast.

- `multirogue.creature` – `Position`, `Information` and `Rogue` (a new rogue
  has 12 hit points, strength 16, armour class 10 and damage dice `"1d4"`).
- `multirogue.event` – `Event`, `new_event` and the payload classes
  `DisplayData`, `LevelData`, `MoveData`, `NotificationData`, `StatsData`.
- `multirogue.dungeon` – `Dungeon`, `Tile` and `new_level`.
- `multirogue.dice` – `roll_dice` rolls dice strings such as `"1d4"` or
  `"2d6+1d8"`; each `NdS` term adds N times a random value from 0 to S-1.
  It raises `InvalidDiceStringError` for a malformed term and `ValueError`
  for a non-numeric count or a non-positive number of sides.
- `multirogue.server` – `Server`, `Hub` and `Client`; `Server.make_app()`
  returns the `aiohttp` application for embedding or testing.

## What it does not do

- No browser front end is included. The server only serves whatever is
  placed in `./public`; without a client page there, players must speak the
  WebSocket protocol themselves.
- Levels are open fields of floor with a single staircase. There are no
  rooms, passages, monsters, items, gold or combat yet, and `roll_dice` is
  not used by the game.
- Nothing is stored: the dungeon lives in memory and is lost when the
  server stops.