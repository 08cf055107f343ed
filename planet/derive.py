"""Derived previews of the baked displacement surface."""

from __future__ import annotations

import numpy as np
from scipy.ndimage import gaussian_filter

from planet.surface import RasterSurface


def displacement_height(surface: RasterSurface) -> np.ndarray:
    """Read a grayscale displacement surface back as float heights in [0, 1]."""

    return surface.to_array()[..., 0].astype(np.float32) / 255.0


def filtered_displacement(surface: RasterSurface, *, sigma_px: float = 2.0) -> np.ndarray:
    """Blur the stippled disc field the way a texture sampler would smooth it.

    Columns wrap because u=0 and u=1 are the same meridian; rows do not.
    """

    if sigma_px < 0:
        raise ValueError("sigma_px must be non-negative")
    height = displacement_height(surface)
    if sigma_px == 0:
        return height
    return gaussian_filter(height, sigma=sigma_px, mode=("nearest", "wrap")).astype(np.float32)


def hillshade(
    height: np.ndarray,
    *,
    azimuth_deg: float = 315.0,
    altitude_deg: float = 45.0,
    z_factor: float = 40.0,
) -> np.ndarray:
    """Compute an 8-bit grayscale hillshade from a [0, 1] height raster."""

    if height.ndim != 2:
        raise ValueError("height must be a 2D array")

    dz_dy, dz_dx = np.gradient(height.astype(np.float32))
    dz_dx = dz_dx * float(z_factor)
    dz_dy = dz_dy * float(z_factor)

    slope = np.pi / 2.0 - np.arctan(np.hypot(dz_dx, dz_dy))
    aspect = np.arctan2(-dz_dx, dz_dy)

    azimuth = np.deg2rad(azimuth_deg)
    altitude = np.deg2rad(altitude_deg)

    shaded = (
        np.sin(altitude) * np.sin(slope)
        + np.cos(altitude) * np.cos(slope) * np.cos(azimuth - aspect)
    )
    shaded = np.clip(shaded, 0.0, 1.0)
    return np.round(shaded * 255.0).astype(np.uint8)


def height_preview_u8(height: np.ndarray) -> np.ndarray:
    return np.round(np.clip(height, 0.0, 1.0) * 255.0).astype(np.uint8)
