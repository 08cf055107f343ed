"""CLI entry point for baking planet textures to disk."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
from pathlib import Path
import platform
import shutil
import tempfile
import time

import numpy as np
import PIL

from planet.config import (
    DEFAULT_MESH_DETAIL,
    DEFAULT_SEED,
    DEFAULT_SURFACE_SIZE,
    ROUGHNESS_THRESHOLD_DISCOUNTED,
    ROUGHNESS_THRESHOLD_EXACT,
    AnimationConfig,
    NoiseConfig,
    PlanetConfig,
    SurfaceConfig,
    TextureOptions,
)
from planet.derive import filtered_displacement, height_preview_u8, hillshade
from planet.io import (
    clean_output_dir,
    resolve_output_dir,
    write_json,
    write_png_u8,
    write_surface_png,
)
from planet.logging_config import setup_logging
from planet.painter import SHIMMER_POLICIES
from planet.texture_set import PlanetTextureSet

logger = logging.getLogger("planet.cli")

_ROUGHNESS_THRESHOLDS = {
    "exact": ROUGHNESS_THRESHOLD_EXACT,
    "discounted": ROUGHNESS_THRESHOLD_DISCOUNTED,
}


def build_parser() -> argparse.ArgumentParser:
    defaults = TextureOptions()
    parser = argparse.ArgumentParser(description="Bake procedural planet textures for a geodesic sphere")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Noise field seed")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--size", type=int, default=DEFAULT_SURFACE_SIZE, help="Surface width and height in pixels")
    parser.add_argument("--detail", type=int, default=DEFAULT_MESH_DETAIL, help="Icosahedron subdivision level")
    parser.add_argument("--frames", type=int, default=1, help="Displacement animation frame count")
    parser.add_argument("--fps", type=float, default=None, help="Playback rate (defaults to --frames)")
    parser.add_argument("--shimmer", choices=sorted(SHIMMER_POLICIES), default="wave", help="Water shimmer policy")
    parser.add_argument(
        "--roughness-threshold",
        choices=sorted(_ROUGHNESS_THRESHOLDS),
        default="exact",
        help="Water level factor below which faces are marked reflective",
    )
    parser.add_argument("--noise-scale", type=float, default=defaults.noise_scale)
    parser.add_argument("--magnitude", type=float, default=defaults.magnitude)
    parser.add_argument("--floor", type=float, default=defaults.floor)
    parser.add_argument("--ceiling", type=float, default=defaults.ceiling)
    parser.add_argument("--water-depth", type=float, default=defaults.water_depth)
    parser.add_argument("--blur-sigma", type=float, default=2.0, help="Preview blur of the displacement field")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument("--verbose", action="store_true", help="Log synthesis progress")
    parser.add_argument("--log-file", default=None, help="Also write log output to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.size < 8:
        parser.error("--size must be at least 8")
    if args.detail < 0:
        parser.error("--detail must be >= 0")
    if args.frames < 1:
        parser.error("--frames must be >= 1")
    if args.fps is not None and args.fps <= 0:
        parser.error("--fps must be positive")
    if args.blur_sigma < 0:
        parser.error("--blur-sigma must be non-negative")

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    options = TextureOptions(
        noise_scale=args.noise_scale,
        magnitude=args.magnitude,
        floor=args.floor,
        ceiling=args.ceiling,
        water_depth=args.water_depth,
    )
    config = PlanetConfig(
        mesh_detail=args.detail,
        noise=NoiseConfig(seed=args.seed),
        surface=SurfaceConfig(
            width=args.size,
            height=args.size,
            roughness_threshold_factor=_ROUGHNESS_THRESHOLDS[args.roughness_threshold],
        ),
        animation=AnimationConfig(frame_count=args.frames, fps=args.fps, shimmer=args.shimmer),
    )

    generation_start = time.perf_counter()
    textures = PlanetTextureSet(options, config=config)
    generation_seconds = time.perf_counter() - generation_start
    stats = textures.stats

    smoothed = filtered_displacement(textures.displacement, sigma_px=args.blur_sigma)
    shade = hillshade(smoothed)

    out_dir = resolve_output_dir(args.out, args.seed, args.size, args.size, overwrite=args.overwrite)
    logger.info("Writing baked textures to %s", out_dir)
    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        for name, surface in textures.surfaces.items():
            write_surface_png(stage_dir / f"{name}.png", surface)
        write_surface_png(stage_dir / "displacement_strip.png", textures.strip.strip)
        write_png_u8(stage_dir / "displacement_filtered.png", height_preview_u8(smoothed))
        write_png_u8(stage_dir / "hillshade.png", shade)

        if args.json:
            deterministic_meta = {
                "seed": args.seed,
                "width": args.size,
                "height": args.size,
                "options": {
                    "noise_scale": textures.options.noise_scale,
                    "magnitude": textures.options.magnitude,
                    "floor": textures.options.floor,
                    "ceiling": textures.options.ceiling,
                    "water_depth": textures.options.water_depth,
                    "water_level": textures.water_level,
                },
                "config": config.to_dict(),
                "mesh": {
                    "vertex_count": textures.mesh.vertex_count,
                    "face_count": stats.face_count,
                },
                "metrics": {
                    "water_face_count": stats.water_face_count,
                    "water_face_fraction": stats.water_face_count / max(stats.face_count, 1),
                    "seam_face_count": stats.seam_face_count,
                    "frame_count": stats.frame_count,
                    "mean_displacement": float(np.mean(smoothed)),
                },
            }
            meta = {
                **deterministic_meta,
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
                "pillow_version": PIL.__version__,
            }
            write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_json(stage_dir / "meta.json", meta)

        clean_output_dir(out_dir)
        for child in stage_dir.iterdir():
            shutil.move(str(child), str(out_dir / child.name))
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    print(f"Baked planet textures: {out_dir}")
    print(
        f"Faces {stats.face_count} ({stats.water_face_count} water, {stats.seam_face_count} on seam); "
        f"water level {textures.water_level:.3f}"
    )
    print(f"Animation: {stats.frame_count} frame(s) at {textures.strip.fps:.2f} fps")
    print(f"Generation time: {generation_seconds:.3f} s ({args.size}x{args.size})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
