"""
Random source abstraction.

Every probabilistic decision of the engine (initiative, critical hits, enemy
damage, escape chance, loot chance and loot selection) draws from a
RandomSource, so callers can inject a seeded or scripted source.
"""

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of `random.Random` the engine relies on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


def default_source(seed: int | None = None) -> RandomSource:
    """Returns a fresh `random.Random`, optionally seeded."""
    return random.Random(seed)


def roll(rng: RandomSource, low: int, high: int) -> int:
    """
    Draws an integer uniformly from the closed range [low, high].

    A degenerate range returns its single value without consuming a draw.

    Args:
        rng (RandomSource): The random source.
        low (int): Lower bound, inclusive.
        high (int): Upper bound, inclusive.

    Returns:
        int: The drawn value.

    """
    if low >= high:
        return low
    return rng.randint(low, high)


def chance(rng: RandomSource, probability: float) -> bool:
    """Returns True with the given probability (one draw, `random() < p`)."""
    return rng.random() < probability


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Picks one element uniformly. A single-element sequence consumes no draw."""
    if not items:
        raise ValueError("Cannot pick from an empty sequence.")
    return items[roll(rng, 0, len(items) - 1)]
