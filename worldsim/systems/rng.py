"""Domain-separated seeded RNG using xxhash.

Every draw hashes (WorldSeed, Domain, Counter) so that each subsystem owns
an independent stream: adding a draw to the combat code does not shift the
numbers the political engine sees.
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from worldsim.core.enums import Domain

T = TypeVar("T")


class SimRandom:
    """Seeded pseudo-random generator with one counter per domain.

    Only the simulator thread draws from it, so the counters need no lock.
    """

    __slots__ = ("_seed", "_counters")

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._counters: dict[int, int] = {}

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain) -> int:
        n = self._counters.get(domain.value, 0)
        self._counters[domain.value] = n + 1
        payload = struct.pack("<qiq", self._seed, domain.value, n)
        return xxhash.xxh64(payload).intdigest()

    def random(self, domain: Domain) -> float:
        """Return a float in [0.0, 1.0)."""
        return self._hash(domain) / (self._MAX_UINT64 + 1)

    def randint(self, domain: Domain, low: int, high: int) -> int:
        """Return an integer in [low, high] inclusive."""
        if high <= low:
            return low
        return low + int(self.random(domain) * (high - low + 1))

    def chance(self, domain: Domain, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random(domain) < probability

    def choice(self, domain: Domain, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("choice from an empty sequence")
        return items[self.randint(domain, 0, len(items) - 1)]

    def shuffled(self, domain: Domain, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self.randint(domain, 0, i)
            out[i], out[j] = out[j], out[i]
        return out
