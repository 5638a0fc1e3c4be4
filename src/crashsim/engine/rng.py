"""Seeded random engines.

Every stochastic decision in a simulation draws from exactly one engine
instance, and the draw sequence is a pure function of the seed and the
number of prior calls. Normals come from the Box-Muller transform over a
(u, v) pair of uniforms, cosine branch only.
"""

import hashlib
import logging
import math
from abc import ABC, abstractmethod

import numpy as np

from . import RandomAlgorithm

logger = logging.getLogger(__name__)

# Legacy dashboard generator: state = (state * a + c) mod m
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

_TWO_PI = 2.0 * math.pi


def _box_muller(u: float, v: float) -> float:
    return math.sqrt(-2.0 * math.log(u)) * math.cos(_TWO_PI * v)


class RandomEngine(ABC):
    """Uniform/normal source driven by a single integer seed."""

    def __init__(self, seed: int):
        self.seed = seed

    @abstractmethod
    def next_uniform(self) -> float:
        """Return the next float in [0, 1)."""

    def _next_nonzero_uniform(self) -> float:
        u = self.next_uniform()
        while u == 0.0:
            u = self.next_uniform()
        return u

    def next_normal(self) -> float:
        u = self._next_nonzero_uniform()
        v = self._next_nonzero_uniform()
        return _box_muller(u, v)

    def next_normals(self, count: int) -> np.ndarray:
        """Draw ``count`` normals, identical to ``count`` calls of next_normal()."""
        out = np.empty(count)
        for i in range(count):
            out[i] = self.next_normal()
        return out


class PCG64Engine(RandomEngine):
    """numpy PCG64 bit generator, one double per uniform."""

    def __init__(self, seed: int):
        super().__init__(seed)
        self._generator = np.random.Generator(np.random.PCG64(seed))

    def next_uniform(self) -> float:
        return float(self._generator.random())

    def next_normals(self, count: int) -> np.ndarray:
        if count <= 0:
            return np.empty(0)

        state = self._generator.bit_generator.state
        uniforms = self._generator.random(2 * count)
        if not uniforms.all():
            # A zero draw is resampled in place, which shifts the (u, v)
            # pairing. Rewind and take the scalar path.
            logger.debug("PCG64: zero uniform in batch of %d, replaying scalar", count)
            self._generator.bit_generator.state = state
            return super().next_normals(count)

        pairs = zip(uniforms[0::2].tolist(), uniforms[1::2].tolist())
        return np.fromiter((_box_muller(u, v) for u, v in pairs), dtype=float, count=count)


class LinearCongruentialEngine(RandomEngine):
    """The dashboard's original generator, kept to reproduce historical runs."""

    def __init__(self, seed: int):
        super().__init__(seed)
        self._state = seed % LCG_MODULUS

    def next_uniform(self) -> float:
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS


_ENGINES: dict[RandomAlgorithm, type[RandomEngine]] = {
    RandomAlgorithm.PCG64: PCG64Engine,
    RandomAlgorithm.LCG: LinearCongruentialEngine,
}


def create_engine(algorithm: RandomAlgorithm | str, seed: int) -> RandomEngine:
    """Instantiate the engine for ``algorithm`` seeded with ``seed``."""
    return _ENGINES[RandomAlgorithm(algorithm)](seed)


def derive_run_seed(seed: int, run_index: int) -> int:
    """Stable per-run seed for partitioned execution (hashlib, not hash())."""
    digest = hashlib.sha256(f"{seed}:{run_index}".encode()).hexdigest()
    return int(digest, 16) % (2**63)
