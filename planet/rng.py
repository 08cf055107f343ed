"""Seeded random streams for the noise permutation and shimmer phases.

Every random draw in a synthesis pass comes from a labelled fork of the planet
seed, so the noise field and the animation never consume the same sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib

import numpy as np

_SEED_MASK = (1 << 64) - 1
_HASH_KEY = b"planet-textures"

NOISE_PERMUTATION = "noise-permutation"
SHIMMER_PHASE = "shimmer-phase"


def _seed_bytes(seed: int) -> bytes:
    return (int(seed) & _SEED_MASK).to_bytes(8, byteorder="big")


def derive_seed(parent_seed: int, label: str) -> int:
    """Hash a label under the parent seed into a 64-bit child seed."""

    digest = hashlib.blake2b(
        label.encode("utf-8"),
        digest_size=8,
        key=_HASH_KEY,
        salt=_seed_bytes(parent_seed),
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


@dataclass(frozen=True)
class RngStream:
    """Immutable seed that forks by label and hands out PCG64 generators."""

    seed: int

    def fork(self, label: str) -> RngStream:
        if not label:
            raise ValueError("fork label must be non-empty")
        return RngStream(derive_seed(self.seed, label))

    def generator(self) -> np.random.Generator:
        return np.random.Generator(np.random.PCG64(int(self.seed) & _SEED_MASK))

    def noise_generator(self) -> np.random.Generator:
        return self.fork(NOISE_PERMUTATION).generator()

    def shimmer_phases(self, count: int) -> np.ndarray:
        """One phase offset in [0, 1) per vertex, the same for every pass."""

        if count < 0:
            raise ValueError("count must be >= 0")
        return self.fork(SHIMMER_PHASE).generator().random(count)
