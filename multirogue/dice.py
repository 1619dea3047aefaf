"""Dice rolling."""

from __future__ import annotations

import random
import re
from typing import Optional

_INTEGER = re.compile(r"[+-]?[0-9]+")
_default_rng = random.Random()


class InvalidDiceStringError(ValueError):
    """The dice string does not have the form "0d0[+0d0+...]"."""

    def __init__(self, dice_str: str) -> None:
        super().__init__(f"invalid dice string: {dice_str!r}")


def _parse_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer in dice string: {text!r}")
    return int(text)


def roll_dice(dice_str: str, rng: Optional[random.Random] = None) -> int:
    """Roll the dice described by ``dice_str``, e.g. "1d4" or "2d6+1d8".

    Each term ``NdS`` adds N times a random value in [0, S).
    Raises InvalidDiceStringError for a malformed term and ValueError for
    a non-numeric count or a non-positive number of sides.
    """
    rng = rng if rng is not None else _default_rng
    result = 0
    for term in dice_str.split("+"):
        parts = term.split("d")
        if len(parts) != 2:
            raise InvalidDiceStringError(dice_str)
        count = _parse_int(parts[0])
        sides = _parse_int(parts[1])
        if sides <= 0:
            raise ValueError(f"dice must have at least one side: {term!r}")
        result += count * rng.randrange(sides)
    return result