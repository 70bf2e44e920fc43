"""
Sequence generators for the memory grid.

All generators implement generate() to produce the sequence the player
must reproduce in the next round.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from gridmemory.game.models import GridPosition


class SequenceGenerator(ABC):
    """
    Abstract base class for sequence generation strategies.

    Generators are owned by a single engine and may keep state between
    rounds of the same game (see ProgressiveSequenceGenerator).
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for the strategy (e.g., 'random', 'progressive')."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the strategy."""
        ...

    @abstractmethod
    def generate(self, length: int, grid_size: int) -> list[GridPosition]:
        """
        Produce the sequence for the next round.

        Args:
            length: Number of steps in the sequence
            grid_size: Rows (and columns) of the grid

        Returns:
            A fresh list of positions; callers may keep it.
        """
        ...

    def reset(self) -> None:
        """Forget any state carried between rounds. Override if stateful."""
        pass

    def random_position(self, grid_size: int) -> GridPosition:
        return GridPosition(
            row=self._rng.randrange(grid_size),
            column=self._rng.randrange(grid_size),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class RandomSequenceGenerator(SequenceGenerator):
    """Every round gets a completely new random pattern."""

    @property
    def name(self) -> str:
        return "random"

    @property
    def description(self) -> str:
        return "Each level has a completely new random pattern"

    def generate(self, length: int, grid_size: int) -> list[GridPosition]:
        return [self.random_position(grid_size) for _ in range(length)]


class ProgressiveSequenceGenerator(SequenceGenerator):
    """
    Extends one persistent base sequence by a single step per round.

    Earlier steps are kept verbatim, so each round's sequence is the
    previous one plus one new position. Once the requested length stops
    growing (the length cap), the base is returned unchanged.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        super().__init__(seed=seed, rng=rng)
        self._base: list[GridPosition] = []

    @property
    def name(self) -> str:
        return "progressive"

    @property
    def description(self) -> str:
        return "Each level adds one step to the previous pattern"

    @property
    def base_sequence(self) -> list[GridPosition]:
        return list(self._base)

    def generate(self, length: int, grid_size: int) -> list[GridPosition]:
        if len(self._base) > length:
            self._base = self._base[:length]
        while len(self._base) < length:
            self._base.append(self.random_position(grid_size))
        return list(self._base)

    def reset(self) -> None:
        self._base = []


def get_generator(name: str, **kwargs) -> SequenceGenerator:
    """
    Get a sequence generator by name.

    Args:
        name: Strategy identifier (random, progressive)
        **kwargs: Passed to the generator constructor (e.g., seed, rng)

    Returns:
        Instantiated generator

    Raises:
        ValueError: If the strategy name is unknown
    """
    generators = {
        "random": RandomSequenceGenerator,
        "progressive": ProgressiveSequenceGenerator,
    }

    if name not in generators:
        available = ", ".join(generators.keys())
        raise ValueError(f"Unknown difficulty '{name}'. Available: {available}")

    return generators[name](**kwargs)
