# dice.py

from __future__ import annotations

import math
import random
from typing import Any

import structlog

DEFAULT_SIDES = 6


def coerce_sides(value: Any) -> int:
    """Turn a raw ``sides`` argument into a usable face count.

    Ints, floats, booleans and numeric strings are accepted; fractions are
    truncated toward zero.  Anything missing, unparsable, non-finite, or
    below 1 after truncation (including an explicit 0) becomes
    ``DEFAULT_SIDES``.
    """
    if value is None:
        return DEFAULT_SIDES
    if isinstance(value, int):
        sides = int(value)
    else:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return DEFAULT_SIDES
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_SIDES
        if not math.isfinite(number):
            return DEFAULT_SIDES
        sides = int(number)
    if sides < 1:
        return DEFAULT_SIDES
    return sides


class DiceRoller:
    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)
        self._log = structlog.get_logger(__name__)

    def roll(self, sides: int) -> int:
        """Draw uniformly from ``[1, sides]``."""
        if sides < 1:
            raise ValueError(f"Bad number of sides: {sides}")
        result = self._rng.randint(1, sides)
        self._log.debug("dice.roll", sides=sides, result=result)
        return result
