"""Seeded 3D fractal noise used to derive surface height."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from planet.config import NoiseConfig
from planet.rng import RngStream


_GRADIENTS_3D = np.array(
    [
        [1.0, 1.0, 0.0],
        [-1.0, 1.0, 0.0],
        [1.0, -1.0, 0.0],
        [-1.0, -1.0, 0.0],
        [1.0, 0.0, 1.0],
        [-1.0, 0.0, 1.0],
        [1.0, 0.0, -1.0],
        [-1.0, 0.0, -1.0],
        [0.0, 1.0, 1.0],
        [0.0, -1.0, 1.0],
        [0.0, 1.0, -1.0],
        [0.0, -1.0, -1.0],
    ],
    dtype=np.float64,
)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def permutation_table(rng: np.random.Generator) -> np.ndarray:
    """Return a shuffled 256-entry permutation repeated to 512 entries."""

    perm = rng.permutation(256).astype(np.int64)
    return np.concatenate((perm, perm))


def _as_points(points: np.ndarray | Sequence[float]) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim == 1:
        pts = pts.reshape(1, -1)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError("points must have shape (N, 3)")
    return np.nan_to_num(pts, nan=0.0, posinf=0.0, neginf=0.0)


def gradient_noise_3d(points: np.ndarray, perm: np.ndarray) -> np.ndarray:
    """Evaluate improved Perlin noise at `points` (N, 3), roughly in [-1, 1]."""

    pts = _as_points(points)
    cell = np.floor(pts)
    frac = pts - cell
    lattice = np.mod(cell, 256.0).astype(np.int64)

    xi, yi, zi = lattice[:, 0], lattice[:, 1], lattice[:, 2]
    x, y, z = frac[:, 0], frac[:, 1], frac[:, 2]
    u, v, w = _fade(x), _fade(y), _fade(z)

    a = perm[xi] + yi
    aa = perm[a] + zi
    ab = perm[a + 1] + zi
    b = perm[xi + 1] + yi
    ba = perm[b] + zi
    bb = perm[b + 1] + zi

    def grad(hashed: np.ndarray, dx: np.ndarray, dy: np.ndarray, dz: np.ndarray) -> np.ndarray:
        g = _GRADIENTS_3D[hashed % 12]
        return g[:, 0] * dx + g[:, 1] * dy + g[:, 2] * dz

    n000 = grad(perm[aa], x, y, z)
    n100 = grad(perm[ba], x - 1.0, y, z)
    n010 = grad(perm[ab], x, y - 1.0, z)
    n110 = grad(perm[bb], x - 1.0, y - 1.0, z)
    n001 = grad(perm[aa + 1], x, y, z - 1.0)
    n101 = grad(perm[ba + 1], x - 1.0, y, z - 1.0)
    n011 = grad(perm[ab + 1], x, y - 1.0, z - 1.0)
    n111 = grad(perm[bb + 1], x - 1.0, y - 1.0, z - 1.0)

    x00 = _lerp(n000, n100, u)
    x10 = _lerp(n010, n110, u)
    x01 = _lerp(n001, n101, u)
    x11 = _lerp(n011, n111, u)
    near = _lerp(x00, x10, v)
    far = _lerp(x01, x11, v)
    return _lerp(near, far, w)


class NoiseField:
    """Fractal Brownian motion over gradient noise, fixed by its seed.

    The field holds no state beyond its permutation table, so any number of
    samples can be taken in any order and the same seed always reproduces the
    same values.
    """

    def __init__(self, config: NoiseConfig | None = None) -> None:
        self.config = config or NoiseConfig()
        if self.config.octaves < 1:
            raise ValueError("octaves must be >= 1")
        self._perm = permutation_table(RngStream(self.config.seed).noise_generator())

    @property
    def seed(self) -> int:
        return self.config.seed

    def sample(self, point: Sequence[float] | np.ndarray) -> float:
        """Sample the field at a single 3D point."""

        return float(self.sample_many(_as_points(point))[0])

    def sample_many(self, points: np.ndarray) -> np.ndarray:
        """Sample the field at every row of an (N, 3) array, result in [-1, 1]."""

        pts = _as_points(points) * self.config.scale
        total = np.zeros(pts.shape[0], dtype=np.float64)
        amplitude = 1.0
        frequency = 1.0
        total_amplitude = 0.0

        for _ in range(self.config.octaves):
            total += amplitude * gradient_noise_3d(pts * frequency, self._perm)
            total_amplitude += amplitude
            frequency *= self.config.lacunarity
            amplitude *= self.config.gain

        if total_amplitude == 0:
            return np.clip(total, -1.0, 1.0)
        return np.clip(total / total_amplitude, -1.0, 1.0)
