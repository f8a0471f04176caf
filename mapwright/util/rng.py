"""Deterministic random number generation with isolated streams.

Every generation run owns one RNGProvider built from the run's seed. Each
pipeline layer asks the provider for its own named stream, so:

1. A level is fully deterministic from the same seed and biome
2. Changes to one layer's random consumption don't cascade to others
3. Concurrent generation runs never share random state

Usage:
    provider = RNGProvider(seed)
    hubs_rng = provider.get("map.hubs")
    radius = hubs_rng.randint(8, 16)

    # Vectorized noise fields for numpy carvers
    noise = numpy_rng(hubs_rng).random((w, h))

Domain naming convention (hierarchical):
    - "map.hubs", "map.links", "map.features"
    - "map.refine", "map.repair"
    - "level.placement"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

import numpy as np

if TYPE_CHECKING:
    from mapwright.types import FloatRange, IntRange, RandomSeed

T = TypeVar("T")


class RNGStream:
    """One named stream of a provider.

    Exposes the subset of the Random interface the generators use, so
    layers cannot reseed or otherwise reach into the shared state.
    """

    def __init__(self, domain: str, rng: Random) -> None:
        self.domain = domain
        self._random = rng

    # -------------------------------------------------------------------------
    # Random methods
    # -------------------------------------------------------------------------

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._random.choice(seq)

    def choices(
        self,
        population: Sequence[T],
        weights: Sequence[float] | None = None,
        *,
        k: int = 1,
    ) -> list[T]:
        """Return k-sized list of elements chosen with replacement."""
        return self._random.choices(population, weights=weights, k=k)

    def shuffle(self, x: list) -> None:
        """Shuffle list x in place."""
        self._random.shuffle(x)

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._random.uniform(a, b)

    def getrandbits(self, k: int) -> int:
        """Return an integer with k random bits."""
        return self._random.getrandbits(k)


# Type alias for functions that accept either Random or RNGStream.
# Use this in type hints: `def foo(rng: RNG) -> int:`
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for the layers of one generation run.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Get the RNG stream for the named domain, creating it on first use.

        Args:
            domain: Hierarchical name like "map.hubs" or "map.links"
        """
        if domain not in self._streams:
            self._streams[domain] = RNGStream(domain, self._new_random(domain))
        return self._streams[domain]

    def _new_random(self, domain: str) -> Random:
        if self._master_seed is None:
            # No seed: use system entropy for non-deterministic behavior
            return Random()
        # Use crc32 instead of hash() - hash() is randomized per Python
        # session via PYTHONHASHSEED, which would break cross-session
        # determinism
        return Random(zlib.crc32(f"{self._master_seed}:{domain}".encode()))


# =============================================================================
# Helpers
# =============================================================================


def numpy_rng(rng: RNG) -> np.random.Generator:
    """Derive a numpy Generator from a stream, for vectorized noise fields.

    Consumes 64 bits from `rng`, so the derived generator is as reproducible
    as the stream it came from.
    """
    return np.random.default_rng(rng.getrandbits(64))


def roll(rng: RNG, bounds: IntRange) -> int:
    """Roll an inclusive integer range."""
    return rng.randint(bounds[0], bounds[1])


def roll_float(rng: RNG, bounds: FloatRange) -> float:
    """Roll a float range."""
    return rng.uniform(bounds[0], bounds[1])
