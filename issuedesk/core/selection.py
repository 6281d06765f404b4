"""Strategies for choosing one copy among several available ones.

Any available copy is acceptable to the desk, so the choice is a
pluggable policy. Tests use the deterministic strategies.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence

from .models import AccessionRecord


class SelectionStrategy(ABC):
    """Picks one record from a non-empty sequence of candidates."""

    @abstractmethod
    def choose(self, candidates: Sequence[AccessionRecord]) -> AccessionRecord:
        """Return one element of ``candidates``.

        Raises:
            ValueError: If ``candidates`` is empty.
        """


class FirstMatchStrategy(SelectionStrategy):
    """Always picks the first candidate."""

    def choose(self, candidates: Sequence[AccessionRecord]) -> AccessionRecord:
        if not candidates:
            raise ValueError("Cannot choose from an empty candidate list")
        return candidates[0]


class RandomSelectionStrategy(SelectionStrategy):
    """Picks uniformly at random using a private generator.

    Passing a seed makes the sequence of choices reproducible.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def choose(self, candidates: Sequence[AccessionRecord]) -> AccessionRecord:
        if not candidates:
            raise ValueError("Cannot choose from an empty candidate list")
        return self._rng.choice(candidates)


def build_strategy(name: str, seed: int | None = None) -> SelectionStrategy:
    """Build a strategy from its configuration name."""
    if name == "first":
        return FirstMatchStrategy()
    if name == "random":
        return RandomSelectionStrategy(seed=seed)
    raise ValueError(f"Unknown selection strategy: {name}")
