"""A multiplayer Rogue-like dungeon game served over WebSockets."""

__version__ = "0.1.0"