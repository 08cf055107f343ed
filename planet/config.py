"""Configuration models for planet texture synthesis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any


DEFAULT_SURFACE_SIZE = 1024
DEFAULT_SEED = 4372857
DEFAULT_MESH_DETAIL = 40

DISC_RADIUS_PX = 5.0
SEAM_MARGIN_PX = 10.0
SEAM_SHIFT = 0.998
REFLECTIVE_TONE = 0x55

ROUGHNESS_THRESHOLD_EXACT = 1.0
ROUGHNESS_THRESHOLD_DISCOUNTED = 0.81

SHIMMER_AMPLITUDE = 0.01
FINE_NOISE_SCALE = 100.0

MIN_WATER_DEPTH = 1e-6


@dataclass(frozen=True)
class TextureOptions:
    """User-facing synthesis parameters, replaced wholesale on every redraw."""

    noise_scale: float = 1.2
    magnitude: float = 1.0
    floor: float = 0.2
    ceiling: float = 1.0
    water_depth: float = 0.05

    @property
    def water_level(self) -> float:
        return self.floor + self.water_depth

    def sanitized(self) -> "TextureOptions":
        """Return a copy with floor/ceiling in [0, 1] and a positive water depth."""

        return replace(
            self,
            floor=min(1.0, max(0.0, float(self.floor))),
            ceiling=min(1.0, max(0.0, float(self.ceiling))),
            water_depth=max(MIN_WATER_DEPTH, float(self.water_depth)),
        )


@dataclass(frozen=True)
class NoiseConfig:
    """Controls the seeded fractal noise field."""

    seed: int = DEFAULT_SEED
    octaves: int = 6
    lacunarity: float = 2.0
    gain: float = 0.5
    scale: float = 1.0


@dataclass(frozen=True)
class SurfaceConfig:
    """Raster surface sizes and painting constants."""

    width: int = DEFAULT_SURFACE_SIZE
    height: int = DEFAULT_SURFACE_SIZE
    disc_radius_px: float = DISC_RADIUS_PX
    seam_margin_px: float = SEAM_MARGIN_PX
    seam_shift: float = SEAM_SHIFT
    reflective_tone: int = REFLECTIVE_TONE
    roughness_threshold_factor: float = ROUGHNESS_THRESHOLD_EXACT


@dataclass(frozen=True)
class AnimationConfig:
    """Displacement shimmer loop settings. `fps=None` plays one loop per second."""

    frame_count: int = 1
    fps: float | None = None
    shimmer: str = "wave"


@dataclass(frozen=True)
class PlanetConfig:
    """Primary texture-set configuration."""

    mesh_detail: int = DEFAULT_MESH_DETAIL
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
