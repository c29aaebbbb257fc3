"""Deterministic random number generation with isolated streams.

Every generation run owns one RNGProvider seeded from its config. Each stage
of the pipeline draws from its own named stream derived from that seed, so:

1. A run is fully deterministic from the same seed
2. Changes to one stage's random consumption don't shift another stage
3. Adding a stage doesn't shift the sequences of existing stages

Usage:
    provider = RNGProvider(config.seed)
    zoning = provider.get("city.zoning")
    split = zoning.randrange(min_size, extent - min_size)

Domain naming convention (hierarchical):
    - "city.zoning", "city.elevation"
    - "city.placement.density", "city.placement.assets"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TypeVar

from citylayout.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """One domain's Random instance, limited to the methods stages draw with."""

    def __init__(self, domain: str, seed: int) -> None:
        self._domain = domain
        self._random = Random(seed)

    @property
    def domain(self) -> str:
        return self._domain

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        """Return randomly selected element from range(start, stop, step)."""
        return self._random.randrange(start, stop, step)

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._random.choice(seq)

    def shuffle(self, x: list) -> None:
        """Shuffle list x in place."""
        self._random.shuffle(x)

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._random.uniform(a, b)


# Type alias for functions that accept either Random or RNGStream.
# Use this in type hints: `def foo(rng: RNG) -> int:`
type RNG = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for the stages of one generation run.

    Each domain gets its own stream derived deterministically from the
    master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get the RNG stream for the named domain, creating it on first use.

        Args:
            domain: Hierarchical name like "city.zoning".

        Returns:
            The domain's RNGStream; repeated calls return the same object.
        """
        stream = self._streams.get(domain)
        if stream is None:
            # crc32 rather than hash(): hash() is salted per interpreter
            # session via PYTHONHASHSEED
            stream = RNGStream(domain, derive_seed(self._master_seed, domain))
            self._streams[domain] = stream
        return stream


def derive_seed(master_seed: int | str, domain: str) -> int:
    """Derive a stable 32-bit seed for a domain from the master seed."""
    return zlib.crc32(f"{master_seed}:{domain}".encode())
