"""Pillow-backed RGB raster surfaces the painter draws into."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw


Color = tuple[int, int, int]
Point = tuple[float, float]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)


class SurfaceAllocationError(MemoryError):
    """Raised when a surface or animation strip cannot be allocated."""


def channel_byte(value: float) -> int:
    """Encode a [0, 1] channel as a byte, clamping out-of-range input."""

    if not math.isfinite(value):
        return 0
    return min(255, max(0, int(math.floor(255.0 * value))))


def gray(value: float) -> Color:
    level = channel_byte(value)
    return (level, level, level)


def rgb(r: float, g: float, b: float) -> Color:
    return (channel_byte(r), channel_byte(g), channel_byte(b))


class RasterSurface:
    """Fixed-size RGB pixel buffer with the drawing primitives the painter needs.

    Every mutating call raises `needs_upload`; a renderer polls it through
    `consume_upload()`, which reports and resets the flag.
    """

    def __init__(self, width: int, height: int, fill: Color = BLACK) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        try:
            image = Image.new("RGB", (int(width), int(height)), fill)
        except MemoryError as exc:
            raise SurfaceAllocationError(f"cannot allocate {width}x{height} surface") from exc
        self._attach(image)

    def _attach(self, image: Image.Image) -> None:
        self._image = image
        self._draw = ImageDraw.Draw(image)
        self.needs_upload = True

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterSurface":
        surface = cls.__new__(cls)
        surface._attach(image.convert("RGB"))
        return surface

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "RasterSurface":
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError("pixels must have shape (H, W, 3)")
        return cls.from_image(Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)))

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def image(self) -> Image.Image:
        return self._image

    def consume_upload(self) -> bool:
        dirty = self.needs_upload
        self.needs_upload = False
        return dirty

    def clear(self, color: Color) -> None:
        self._draw.rectangle((0, 0, self.width, self.height), fill=color)
        self.needs_upload = True

    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        self._draw.polygon([(float(x), float(y)) for x, y in points], fill=color)
        self.needs_upload = True

    def stroke_polygon(self, points: Sequence[Point], color: Color, *, width: int = 1) -> None:
        closed = [(float(x), float(y)) for x, y in points]
        closed.append(closed[0])
        self._draw.line(closed, fill=color, width=width)
        self.needs_upload = True

    def fill_circle(self, center: Point, radius: float, color: Color) -> None:
        x, y = center
        self._draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=color)
        self.needs_upload = True

    def get_pixel(self, x: int, y: int) -> Color:
        return tuple(self._image.getpixel((int(x), int(y))))  # type: ignore[return-value]

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._image.putpixel((int(x), int(y)), color)
            self.needs_upload = True

    def paste(self, other: "RasterSurface", offset: tuple[int, int] = (0, 0)) -> None:
        self._image.paste(other.image, offset)
        self.needs_upload = True

    def crop(self, box: tuple[int, int, int, int]) -> "RasterSurface":
        return RasterSurface.from_image(self._image.crop(box))

    def copy(self) -> "RasterSurface":
        return RasterSurface.from_image(self._image.copy())

    def to_array(self) -> np.ndarray:
        return np.array(self._image, dtype=np.uint8)

    def tobytes(self) -> bytes:
        return self._image.tobytes()
