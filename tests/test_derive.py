from __future__ import annotations

import numpy as np

from planet.derive import displacement_height, filtered_displacement, hillshade
from planet.surface import RasterSurface, gray


def _stippled() -> RasterSurface:
    surface = RasterSurface(64, 32)
    surface.fill_circle((2.0, 16.0), 5.0, gray(1.0))
    return surface


def test_displacement_reads_back_unit_heights() -> None:
    height = displacement_height(_stippled())

    assert height.shape == (32, 64)
    assert height.max() == 1.0
    assert height.min() == 0.0


def test_filter_smooths_and_wraps_columns() -> None:
    smoothed = filtered_displacement(_stippled(), sigma_px=2.0)

    assert smoothed.max() < 1.0
    assert smoothed[16, 63] > 0.0
    assert smoothed[16, 32] == 0.0


def test_zero_sigma_returns_raw_heights() -> None:
    surface = _stippled()

    assert np.array_equal(filtered_displacement(surface, sigma_px=0.0), displacement_height(surface))


def test_hillshade_of_flat_field_is_uniform() -> None:
    shade = hillshade(np.full((16, 16), 0.4, dtype=np.float32))

    assert shade.dtype == np.uint8
    assert len(np.unique(shade)) == 1
