"""Output serialization for baked planet textures."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
from typing import Any

import numpy as np
from PIL import Image

from planet.surface import RasterSurface


def resolve_output_dir(
    out_root: str | Path,
    seed: int,
    width: int,
    height: int,
    *,
    overwrite: bool,
) -> Path:
    """Create and return the output directory for one bake."""

    target = Path(out_root) / f"seed-{seed}" / f"{width}x{height}"
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def clean_output_dir(target: Path) -> None:
    """Delete all children of an output directory."""

    for child in target.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def write_surface_png(path: str | Path, surface: RasterSurface) -> None:
    surface.image.save(Path(path), format="PNG")


def write_png_u8(path: str | Path, raster_u8: np.ndarray) -> None:
    image = Image.fromarray(np.ascontiguousarray(raster_u8, dtype=np.uint8))
    image.save(Path(path), format="PNG")


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
