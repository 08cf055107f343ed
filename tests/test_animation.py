from __future__ import annotations

import pytest

from planet.animation import AnimationStrip
from planet.surface import RasterSurface, gray


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _strip(frame_count: int = 4, fps: float | None = None) -> tuple[AnimationStrip, FakeClock]:
    clock = FakeClock()
    source = RasterSurface(8, 6)
    strip = AnimationStrip(source, frame_count, fps, clock=clock)
    strip.draw_all_frames(lambda i, frame: frame.clear(gray(i / 10.0)))
    return strip, clock


def test_strip_stacks_frames_vertically() -> None:
    strip, _ = _strip()

    assert strip.strip.size == (8, 24)
    for i in range(4):
        assert strip.strip.get_pixel(3, i * 6) == gray(i / 10.0)
        assert strip.strip.get_pixel(3, i * 6 + 5) == gray(i / 10.0)


def test_frames_are_clipped_to_their_window() -> None:
    clock = FakeClock()
    strip = AnimationStrip(RasterSurface(8, 6), 2, clock=clock)

    strip.draw_all_frames(
        lambda i, frame: frame.fill_circle((4.0, 5.0), 4.0, (255, 255, 255)) if i == 0 else None
    )

    assert strip.strip.get_pixel(4, 5) == (255, 255, 255)
    assert strip.strip.get_pixel(4, 7) == (0, 0, 0)


def test_update_advances_one_frame_per_interval_and_wraps() -> None:
    strip, clock = _strip(frame_count=4, fps=4)

    assert strip.update()
    assert strip.current_frame == 1
    assert strip.source.get_pixel(0, 0) == gray(0.0)

    for expected in (2, 3, 0):
        clock.now += 250.0
        assert strip.update()
        assert strip.current_frame == expected

    assert strip.source.get_pixel(0, 0) == gray(0.3)


def test_update_within_interval_is_a_no_op() -> None:
    strip, clock = _strip(frame_count=4, fps=4)
    strip.update()
    strip.source.consume_upload()

    clock.now += 249.0

    assert not strip.update()
    assert strip.current_frame == 1
    assert not strip.source.consume_upload()


def test_long_stall_advances_only_once() -> None:
    strip, clock = _strip(frame_count=4, fps=4)
    strip.update()

    clock.now += 10_000.0

    assert strip.update()
    assert strip.current_frame == 2
    assert not strip.update()


def test_fps_defaults_to_frame_count() -> None:
    strip, _ = _strip(frame_count=8)

    assert strip.fps == 8.0
    assert strip.frame_interval_ms == pytest.approx(125.0)


def test_single_frame_strip_copies_its_frame_once() -> None:
    strip, clock = _strip(frame_count=1)

    assert strip.update()
    strip.source.consume_upload()
    clock.now += 1000.0

    assert not strip.update()
    assert strip.current_frame == 0
    assert not strip.source.consume_upload()


def test_start_shows_frame_zero_and_waits_one_interval() -> None:
    strip, clock = _strip(frame_count=4, fps=4)

    strip.start()

    assert strip.source.get_pixel(0, 0) == gray(0.0)
    assert strip.current_frame == 1
    strip.source.consume_upload()
    assert not strip.update()
    assert not strip.source.consume_upload()

    clock.now += 250.0
    assert strip.update()
    assert strip.source.get_pixel(0, 0) == gray(0.1)
    assert strip.current_frame == 2


def test_started_single_frame_strip_never_reports_a_change() -> None:
    strip, clock = _strip(frame_count=1)
    strip.start()
    strip.source.consume_upload()

    for _ in range(3):
        clock.now += 1000.0
        assert not strip.update()

    assert not strip.source.consume_upload()
    assert strip.source.get_pixel(0, 0) == gray(0.0)


def test_present_copies_frame_without_touching_playback() -> None:
    strip, _ = _strip()

    strip.present(2)

    assert strip.source.get_pixel(5, 5) == gray(0.2)
    assert strip.current_frame == 0


@pytest.mark.parametrize("frame_count, fps", [(0, None), (2, 0.0), (2, -1.0)])
def test_invalid_strip_arguments_are_rejected(frame_count: int, fps: float | None) -> None:
    with pytest.raises(ValueError):
        AnimationStrip(RasterSurface(4, 4), frame_count, fps)
