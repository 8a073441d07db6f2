"""Unbiased shuffling over an injected random generator."""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """
    Fisher-Yates shuffle of a copy of `items`.

    Pass a seeded random.Random for reproducible orderings.
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
