"""Paint mesh faces into the displacement, color and roughness surfaces."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable

import numpy as np

from planet.config import SHIMMER_AMPLITUDE, SurfaceConfig, TextureOptions
from planet.height import VertexHeights
from planet.surface import Color, RasterSurface, gray, rgb


ShimmerPolicy = Callable[[VertexHeights, np.ndarray, int, int], np.ndarray]

PHASE_SHIMMER_GAIN = 0.05


def texture_points(uvs: np.ndarray, width: int, height: int) -> np.ndarray:
    """Map UVs to pixel space; v is flipped because row 0 is the top."""

    uvs = np.asarray(uvs, dtype=np.float64)
    x = uvs[:, 0] * (width - 2) + 0.5
    y = (1.0 - uvs[:, 1]) * (height - 2) + 0.5
    return np.stack((x, y), axis=-1)


def face_color(height_avg: float, water_level: float, water_depth: float) -> Color:
    """Green-dominant land fading to blue as height drops below the water level."""

    green = min(1.0, max(0.0, math.sin(height_avg / 2.0 + 0.5))) ** 2
    blue = min(1.0, max(0.0, (water_level - height_avg) / water_depth))
    return rgb(0.1, green, blue)


def seam_outlines(points: np.ndarray, width: int, margin: float, shift: float) -> list[np.ndarray]:
    """Return the face outline plus the copies needed to cover the seam.

    A face near one edge is repeated shifted by `width * shift` toward the
    other edge. A face with vertices near both edges spans the whole surface
    at its true position, so it is also rewrapped: its right-edge vertices are
    moved left of the seam, and that narrow outline is painted at both edges.
    """

    x = points[:, 0]
    near_left = x < margin
    near_right = x > width - margin
    span = width * shift

    if near_left.any() and near_right.any():
        wrapped = points.copy()
        wrapped[near_right, 0] -= span
        return [points, wrapped, _shifted(wrapped, span)]
    if near_left.any():
        return [points, _shifted(points, span)]
    if near_right.any():
        return [points, _shifted(points, -span)]
    return [points]


def _shifted(points: np.ndarray, dx: float) -> np.ndarray:
    shifted = points.copy()
    shifted[:, 0] += dx
    return shifted


def wave_shimmer(heights: VertexHeights, phases: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Water ripple driven by the fine wave channel and a per-vertex phase."""

    water = heights.height < heights.water_level
    t = (frame_index / frame_count + phases) * 2.0 * math.pi
    ripple = (np.sin(heights.wave + np.sin(t)) + 1.0) / 2.0 * SHIMMER_AMPLITUDE
    return np.where(water, ripple, 0.0)


def phase_shimmer(heights: VertexHeights, phases: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Plain sine swell per vertex, proportional to the height scale."""

    water = heights.height < heights.water_level
    t = (phases + frame_index / frame_count) * 2.0 * math.pi
    swell = (np.sin(t) + 1.0) / 2.0 * heights.scale * PHASE_SHIMMER_GAIN
    return np.where(water, swell, 0.0)


SHIMMER_POLICIES: dict[str, ShimmerPolicy] = {
    "wave": wave_shimmer,
    "phase": phase_shimmer,
}


def shimmer_policy(name: str) -> ShimmerPolicy:
    try:
        return SHIMMER_POLICIES[name]
    except KeyError:
        options = ", ".join(sorted(SHIMMER_POLICIES))
        raise ValueError(f"unknown shimmer policy {name!r}; expected one of: {options}") from None


@dataclass(frozen=True)
class FaceSummary:
    """What painting one face decided."""

    height_avg: float
    is_water: bool
    seam_copies: int


class SurfacePainter:
    """Rasterizes faces for one synthesis pass with fixed options."""

    def __init__(self, config: SurfaceConfig, options: TextureOptions) -> None:
        self.config = config
        self.options = options
        self.water_level = options.water_level
        self.roughness_threshold = self.water_level * config.roughness_threshold_factor
        tone = min(255, max(0, int(config.reflective_tone)))
        self.reflective: Color = (tone, tone, tone)

    def texture_points(self, uvs: np.ndarray) -> np.ndarray:
        return texture_points(uvs, self.config.width, self.config.height)

    def paint_face(
        self,
        points: np.ndarray,
        heights: np.ndarray,
        color_surface: RasterSurface,
        roughness_surface: RasterSurface,
    ) -> FaceSummary:
        """Paint one face's color polygon and, for water, its roughness polygon."""

        height_avg = float(np.mean(heights))
        outlines = seam_outlines(
            points, color_surface.width, self.config.seam_margin_px, self.config.seam_shift
        )

        color = face_color(height_avg, self.water_level, self.options.water_depth)
        for outline in outlines:
            polygon = [(x, y) for x, y in outline]
            color_surface.fill_polygon(polygon, color)
            color_surface.stroke_polygon(polygon, color)

        is_water = height_avg < self.roughness_threshold
        if is_water:
            for outline in outlines:
                roughness_surface.fill_polygon([(x, y) for x, y in outline], self.reflective)

        return FaceSummary(height_avg=height_avg, is_water=is_water, seam_copies=len(outlines) - 1)

    def paint_discs(self, surface: RasterSurface, points: np.ndarray, levels: np.ndarray) -> None:
        """Stipple one grayscale disc per point, later discs over earlier ones."""

        radius = self.config.disc_radius_px
        for (x, y), level in zip(points, levels):
            surface.fill_circle((x, y), radius, gray(float(level)))
