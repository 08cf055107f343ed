"""Pre-rendered frame strip for cheap looping surface animation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable

from planet.surface import RasterSurface

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
FramePainter = Callable[[int, RasterSurface], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class PlaybackState:
    """Frame shown next and when playback last advanced (milliseconds)."""

    current_frame: int = 0
    last_advance_ms: float | None = None


class AnimationStrip:
    """N copies of a source surface stacked vertically, played back in a loop.

    Frame ``i`` occupies rows ``[i * H, (i + 1) * H)`` of the strip. Playback
    copies one frame window into the source per advance, so a tick costs one
    raster copy instead of repainting. The strip assumes nothing else writes
    to the source between frames.
    """

    def __init__(
        self,
        source: RasterSurface,
        frame_count: int,
        fps: float | None = None,
        *,
        clock: Clock = monotonic_ms,
    ) -> None:
        if frame_count < 1:
            raise ValueError("frame_count must be >= 1")
        rate = float(frame_count if fps is None else fps)
        if rate <= 0:
            raise ValueError("fps must be positive")

        self.source = source
        self.frame_count = int(frame_count)
        self.fps = rate
        self.strip = RasterSurface(source.width, source.height * self.frame_count)
        self.playback = PlaybackState()
        self._shown_frame: int | None = None
        self._clock = clock
        logger.debug(
            "Allocated %dx%d strip for %d frame(s) at %.2f fps",
            self.strip.width,
            self.strip.height,
            self.frame_count,
            self.fps,
        )

    @property
    def frame_height(self) -> int:
        return self.source.height

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / self.fps

    @property
    def current_frame(self) -> int:
        return self.playback.current_frame

    def frame_box(self, frame_index: int) -> tuple[int, int, int, int]:
        top = (frame_index % self.frame_count) * self.frame_height
        return (0, top, self.source.width, top + self.frame_height)

    def draw_all_frames(self, paint: FramePainter) -> None:
        """Call `paint(i, frame)` once per frame and stack the results.

        Each frame starts as a copy of the source, so drawing is clipped to one
        frame and the painter never needs to know its offset in the strip.
        """

        for frame_index in range(self.frame_count):
            frame = self.source.copy()
            paint(frame_index, frame)
            self.strip.paste(frame, (0, frame_index * self.frame_height))
        self._shown_frame = None

    def frame(self, frame_index: int) -> RasterSurface:
        return self.strip.crop(self.frame_box(frame_index))

    def present(self, frame_index: int) -> None:
        """Copy one frame into the source without advancing playback."""

        self.source.paste(self.frame(frame_index))
        self._shown_frame = frame_index % self.frame_count

    def start(self) -> None:
        """Show frame 0 now and schedule the next frame one interval later."""

        self.present(0)
        self.playback.current_frame = 1 % self.frame_count
        self.playback.last_advance_ms = self._clock()

    def update(self) -> bool:
        """Advance at most one frame if a frame interval has elapsed.

        Returns True only when the source pixels changed; a frame that is
        already on the source is not copied again.
        """

        now = self._clock()
        last = self.playback.last_advance_ms
        if last is not None and now - last < self.frame_interval_ms:
            return False

        frame_index = self.playback.current_frame
        self.playback.current_frame = (frame_index + 1) % self.frame_count
        self.playback.last_advance_ms = now
        if frame_index == self._shown_frame:
            return False
        self.present(frame_index)
        return True
