# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Injectable sources of uniform random draws.

The path generator never touches global random state. It asks a
RandomSource for draws in [0, 1), and the engine hands every simulation
its own child source so that curves never share a stream.

Example:
    >>> source = NumpyRandomSource(seed=42)
    >>> children = source.spawn(3)
    >>> draws = [child.random() for child in children]
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

import numpy as np


class RandomSource(ABC):
    """Interface for a source of uniform draws in [0, 1)."""

    @abstractmethod
    def random(self) -> float:
        """Return the next draw in [0, 1)."""

    @abstractmethod
    def spawn(self, n: int) -> List['RandomSource']:
        """Return ``n`` independent child sources."""


class NumpyRandomSource(RandomSource):
    """Uniform draws from a numpy PCG64 generator.

    Child sources are derived with ``SeedSequence.spawn`` so they are
    statistically independent and reproducible from the parent seed.

    Args:
        seed: Optional seed (int or SeedSequence). None draws fresh entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        if isinstance(seed, np.random.SeedSequence):
            self._seed_sequence = seed
        else:
            self._seed_sequence = np.random.SeedSequence(seed)
        self._generator = np.random.default_rng(self._seed_sequence)

    @property
    def entropy(self):
        return self._seed_sequence.entropy

    def random(self) -> float:
        return float(self._generator.random())

    def spawn(self, n: int) -> List['NumpyRandomSource']:
        if n < 0:
            raise ValueError(f"Cannot spawn a negative number of sources: {n}")
        return [NumpyRandomSource(child) for child in self._seed_sequence.spawn(n)]

    def __repr__(self) -> str:
        return f"NumpyRandomSource(entropy={self._seed_sequence.entropy})"


class ScriptedRandomSource(RandomSource):
    """Replays a fixed sequence of draws.

    Intended for tests that need an exact win/loss sequence. Every
    spawned child replays its own copy of the full script.

    Args:
        draws: Values in [0, 1) returned in order by ``random()``
    """

    def __init__(self, draws: Iterable[float]):
        self._draws = [float(d) for d in draws]
        for d in self._draws:
            if not 0.0 <= d < 1.0:
                raise ValueError(f"Scripted draws must lie in [0, 1), got {d}")
        self._position = 0

    def random(self) -> float:
        if self._position >= len(self._draws):
            raise IndexError(
                f"Scripted random source exhausted after {len(self._draws)} draws"
            )
        value = self._draws[self._position]
        self._position += 1
        return value

    def spawn(self, n: int) -> List['ScriptedRandomSource']:
        if n < 0:
            raise ValueError(f"Cannot spawn a negative number of sources: {n}")
        return [ScriptedRandomSource(self._draws) for _ in range(n)]

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[bool], win_rate: float) -> 'ScriptedRandomSource':
        """Build a script that yields the given win/loss outcomes at ``win_rate``."""
        if not 0.0 < win_rate < 1.0:
            raise ValueError("win_rate must be strictly between 0 and 1 to script both outcomes")
        return cls(win_rate / 2.0 if win else (1.0 + win_rate) / 2.0 for win in outcomes)
