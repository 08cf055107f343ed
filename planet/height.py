"""Map raw noise samples to paintable surface heights."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from planet.config import FINE_NOISE_SCALE, TextureOptions
from planet.mesh import Mesh
from planet.noise import NoiseField


def height_scale(options: TextureOptions) -> float:
    """Factor applied to a noise sample before it is added to the floor."""

    return abs(options.ceiling - options.floor) * options.magnitude


def surface_height(noise_sample: float, options: TextureOptions) -> float:
    """Scale a noise sample up from `options.floor`, saturating at 1."""

    scaled = min(1.0, max(0.0, noise_sample * height_scale(options)))
    return min(1.0, options.floor + scaled)


def surface_heights(noise_samples: np.ndarray, options: TextureOptions) -> np.ndarray:
    scaled = np.clip(np.asarray(noise_samples, dtype=np.float64) * height_scale(options), 0.0, 1.0)
    return np.minimum(1.0, options.floor + scaled)


def water_level(options: TextureOptions) -> float:
    return options.floor + options.water_depth


@dataclass(frozen=True, eq=False)
class VertexHeights:
    """Per-vertex results of one height pass."""

    height: np.ndarray
    wave: np.ndarray
    water_level: float
    scale: float


class HeightMapper:
    """Sample the noise field at every mesh vertex and normalize the result."""

    def __init__(self, noise: NoiseField, options: TextureOptions) -> None:
        self.noise = noise
        self.options = options

    @property
    def water_level(self) -> float:
        return water_level(self.options)

    def height_at(self, position: np.ndarray) -> float:
        sample = self.noise.sample(np.asarray(position, dtype=np.float64) * self.options.noise_scale)
        return surface_height(sample, self.options)

    def map_mesh(self, mesh: Mesh) -> VertexHeights:
        """Heights for all vertices plus the fine wave channel used for shimmer."""

        scaled = mesh.positions * self.options.noise_scale
        heights = surface_heights(self.noise.sample_many(scaled), self.options)
        wave = self.noise.sample_many(scaled * FINE_NOISE_SCALE)
        return VertexHeights(
            height=heights,
            wave=wave,
            water_level=self.water_level,
            scale=height_scale(self.options),
        )
