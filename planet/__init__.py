"""Procedural planet texture synthesis package."""

from .config import (
    DEFAULT_SEED,
    DEFAULT_SURFACE_SIZE,
    AnimationConfig,
    NoiseConfig,
    PlanetConfig,
    SurfaceConfig,
    TextureOptions,
)
from .texture_set import PlanetTextureSet

__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_SURFACE_SIZE",
    "AnimationConfig",
    "NoiseConfig",
    "PlanetConfig",
    "PlanetTextureSet",
    "SurfaceConfig",
    "TextureOptions",
]
