from __future__ import annotations

import numpy as np
import pytest

from planet.config import ROUGHNESS_THRESHOLD_DISCOUNTED, SurfaceConfig, TextureOptions
from planet.height import VertexHeights
from planet.painter import (
    SurfacePainter,
    face_color,
    phase_shimmer,
    seam_outlines,
    shimmer_policy,
    texture_points,
    wave_shimmer,
)
from planet.surface import WHITE, RasterSurface

SIZE = 128
OPTIONS = TextureOptions(noise_scale=1.2, magnitude=1.0, floor=0.2, ceiling=1.0, water_depth=0.05)


def _painter(**overrides: float) -> SurfacePainter:
    return SurfacePainter(SurfaceConfig(width=SIZE, height=SIZE, **overrides), OPTIONS)


def _surfaces() -> tuple[RasterSurface, RasterSurface]:
    return RasterSurface(SIZE, SIZE, fill=WHITE), RasterSurface(SIZE, SIZE, fill=WHITE)


def _centre_face(painter: SurfacePainter) -> np.ndarray:
    return painter.texture_points(np.array([[0.4, 0.4], [0.6, 0.4], [0.5, 0.6]]))


def test_texture_points_flip_v_and_inset_half_pixel() -> None:
    points = texture_points(np.array([[0.0, 1.0], [1.0, 0.0]]), SIZE, SIZE)

    assert points[0].tolist() == [0.5, 0.5]
    assert points[1].tolist() == [SIZE - 1.5, SIZE - 1.5]


def test_land_colour_is_green_and_water_colour_is_blue() -> None:
    land = face_color(0.8, water_level=0.25, water_depth=0.05)
    water = face_color(0.1, water_level=0.25, water_depth=0.05)

    assert land[0] == 25
    assert land[2] == 0
    assert land[1] > land[0]
    assert water[2] == 255


def test_seam_outlines_follow_edges() -> None:
    span = SIZE * 0.998
    left = np.array([[3.0, 5.0], [40.0, 5.0]])
    right = np.array([[120.0, 5.0], [40.0, 5.0]])
    inner = np.array([[30.0, 5.0], [40.0, 5.0]])

    assert len(seam_outlines(inner, SIZE, 10.0, 0.998)) == 1

    original, copy = seam_outlines(left, SIZE, 10.0, 0.998)
    assert np.array_equal(original, left)
    assert copy[:, 0].tolist() == pytest.approx([3.0 + span, 40.0 + span])

    _, copy = seam_outlines(right, SIZE, 10.0, 0.998)
    assert copy[:, 0].tolist() == pytest.approx([120.0 - span, 40.0 - span])


def test_face_on_both_edges_is_rewrapped_across_the_seam() -> None:
    span = SIZE * 0.998
    points = np.array([[2.0, 5.0], [125.0, 9.0], [2.0, 13.0]])

    original, wrapped, wrapped_right = seam_outlines(points, SIZE, 10.0, 0.998)

    assert np.array_equal(original, points)
    assert wrapped[:, 0].tolist() == pytest.approx([2.0, 125.0 - span, 2.0])
    assert wrapped_right[:, 0].tolist() == pytest.approx([2.0 + span, 125.0, 2.0 + span])


def test_water_face_is_marked_reflective() -> None:
    painter = _painter()
    color, roughness = _surfaces()

    summary = painter.paint_face(_centre_face(painter), np.array([0.2, 0.21, 0.22]), color, roughness)

    assert summary.is_water
    assert roughness.get_pixel(64, 60) == (0x55, 0x55, 0x55)
    assert color.get_pixel(64, 60) == face_color(summary.height_avg, 0.25, 0.05)


def test_land_face_leaves_roughness_untouched() -> None:
    painter = _painter()
    color, roughness = _surfaces()

    summary = painter.paint_face(_centre_face(painter), np.array([0.5, 0.6, 0.7]), color, roughness)

    assert not summary.is_water
    assert (roughness.to_array() == 255).all()
    assert color.get_pixel(64, 60) != WHITE


def test_discounted_threshold_keeps_shallow_water_rough() -> None:
    painter = _painter(roughness_threshold_factor=ROUGHNESS_THRESHOLD_DISCOUNTED)
    color, roughness = _surfaces()

    summary = painter.paint_face(_centre_face(painter), np.array([0.23, 0.23, 0.23]), color, roughness)

    assert not summary.is_water
    assert (roughness.to_array() == 255).all()


def test_seam_face_paints_both_edge_columns() -> None:
    painter = _painter()
    color, roughness = _surfaces()
    # u=1.03 is u=0.03 wrapped past the seam.
    points = painter.texture_points(np.array([[0.97, 0.4], [1.03, 0.5], [0.97, 0.6]]))

    summary = painter.paint_face(points, np.array([0.2, 0.2, 0.2]), color, roughness)

    assert summary.seam_copies == 1
    assert color.get_pixel(SIZE - 1, 63) != WHITE
    assert color.get_pixel(0, 63) != WHITE
    assert roughness.get_pixel(0, 63) != WHITE


def test_face_straddling_the_seam_paints_both_edge_columns() -> None:
    painter = _painter()
    color, roughness = _surfaces()
    points = painter.texture_points(np.array([[0.001, 0.4], [0.999, 0.5], [0.001, 0.6]]))

    summary = painter.paint_face(points, np.array([0.2, 0.2, 0.2]), color, roughness)

    assert summary.seam_copies == 2
    assert color.get_pixel(0, 63) != WHITE
    assert color.get_pixel(SIZE - 1, 63) != WHITE
    assert roughness.get_pixel(0, 63) != WHITE
    assert roughness.get_pixel(SIZE - 1, 63) != WHITE


def test_discs_use_floor_of_height() -> None:
    painter = _painter()
    surface = RasterSurface(SIZE, SIZE)

    painter.paint_discs(surface, np.array([[20.0, 20.0], [80.0, 80.0]]), np.array([0.5, 1.4]))

    assert surface.get_pixel(20, 20) == (127, 127, 127)
    assert surface.get_pixel(80, 80) == (255, 255, 255)
    assert surface.get_pixel(50, 50) == (0, 0, 0)


def _heights() -> VertexHeights:
    return VertexHeights(
        height=np.array([0.2, 0.22, 0.5]),
        wave=np.array([0.3, -0.4, 0.1]),
        water_level=0.25,
        scale=0.8,
    )


@pytest.mark.parametrize("policy", [wave_shimmer, phase_shimmer])
def test_shimmer_only_moves_water_vertices(policy) -> None:
    phases = np.array([0.1, 0.6, 0.3])

    for frame in range(4):
        jitter = policy(_heights(), phases, frame, 4)
        assert jitter[2] == 0.0
        assert (jitter >= 0.0).all()


def test_shimmer_is_a_pure_function_of_vertex_and_frame() -> None:
    phases = np.array([0.1, 0.6, 0.3])

    first = wave_shimmer(_heights(), phases, 2, 4)
    again = wave_shimmer(_heights(), phases, 2, 4)
    other = wave_shimmer(_heights(), phases, 1, 4)

    assert np.array_equal(first, again)
    assert not np.array_equal(first, other)
    assert first.max() <= 0.01


def test_unknown_shimmer_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        shimmer_policy("tidal")
