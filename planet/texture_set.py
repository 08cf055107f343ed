"""Own the planet's raster surfaces and drive one synthesis pass per redraw."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time

from planet.animation import AnimationStrip, Clock, monotonic_ms
from planet.config import PlanetConfig, TextureOptions
from planet.faces import Face, face_indices, for_each_face
from planet.height import HeightMapper
from planet.mesh import Mesh, icosahedron_mesh
from planet.noise import NoiseField
from planet.painter import SurfacePainter, shimmer_policy
from planet.rng import RngStream
from planet.surface import BLACK, WHITE, RasterSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedrawStats:
    """Summary of the most recent synthesis pass."""

    face_count: int
    water_face_count: int
    seam_face_count: int
    frame_count: int
    water_level: float
    seconds: float


class PlanetTextureSet:
    """Displacement, color and roughness surfaces for one planet mesh.

    The set is single-owner: `redraw` and `update` must not run concurrently
    on the same instance, and a nested `redraw` raises `RuntimeError`.
    """

    strip: AnimationStrip
    stats: RedrawStats

    def __init__(
        self,
        options: TextureOptions,
        mesh: Mesh | None = None,
        *,
        config: PlanetConfig | None = None,
        noise: NoiseField | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or PlanetConfig()
        self.mesh = mesh if mesh is not None else icosahedron_mesh(1.0, self.config.mesh_detail)
        self.noise = noise or NoiseField(self.config.noise)
        self._clock = clock or monotonic_ms
        shimmer_policy(self.config.animation.shimmer)

        size = (self.config.surface.width, self.config.surface.height)
        self.displacement = RasterSurface(*size, fill=BLACK)
        self.color = RasterSurface(*size, fill=WHITE)
        self.roughness = RasterSurface(*size, fill=WHITE)

        self.options = options.sanitized()
        self._redrawing = False
        self.redraw(options)

    @property
    def surfaces(self) -> dict[str, RasterSurface]:
        return {
            "displacement": self.displacement,
            "color": self.color,
            "roughness": self.roughness,
        }

    @property
    def water_level(self) -> float:
        return self.options.water_level

    def redraw(self, options: TextureOptions) -> None:
        """Repaint every surface and rebuild the displacement animation."""

        if self._redrawing:
            raise RuntimeError("redraw is already in progress on this texture set")
        self._redrawing = True
        try:
            self._synthesize(options.sanitized())
        finally:
            self._redrawing = False

    def update(self) -> bool:
        """Advance the displacement animation; True when it needs re-upload."""

        return self.strip.update()

    def _synthesize(self, options: TextureOptions) -> None:
        start = time.perf_counter()
        anim = self.config.animation
        self.options = options

        self.color.clear(WHITE)
        self.roughness.clear(WHITE)
        self.displacement.clear(BLACK)
        strip = AnimationStrip(self.displacement, anim.frame_count, anim.fps, clock=self._clock)
        self.strip = strip

        heights = HeightMapper(self.noise, options).map_mesh(self.mesh)
        painter = SurfacePainter(self.config.surface, options)
        points = painter.texture_points(self.mesh.uvs)

        water_faces = 0
        seam_faces = 0

        def paint_face(face: Face) -> None:
            nonlocal water_faces, seam_faces
            ids = [vertex.index for vertex in face.vertices]
            summary = painter.paint_face(points[ids], heights.height[ids], self.color, self.roughness)
            water_faces += int(summary.is_water)
            seam_faces += int(summary.seam_copies > 0)

        face_count = for_each_face(self.mesh, paint_face)

        # Discs are stippled in walk order so overlaps resolve the same way every pass.
        order = face_indices(self.mesh).ravel()
        disc_points = points[order]
        phases = RngStream(self.noise.seed).shimmer_phases(self.mesh.vertex_count)
        shimmer = shimmer_policy(anim.shimmer)

        def paint_frame(frame_index: int, frame: RasterSurface) -> None:
            levels = heights.height + shimmer(heights, phases, frame_index, strip.frame_count)
            painter.paint_discs(frame, disc_points, levels[order])

        strip.draw_all_frames(paint_frame)
        strip.start()

        self.stats = RedrawStats(
            face_count=face_count,
            water_face_count=water_faces,
            seam_face_count=seam_faces,
            frame_count=strip.frame_count,
            water_level=float(heights.water_level),
            seconds=time.perf_counter() - start,
        )
        logger.debug(
            "Redraw painted %d faces (%d water, %d on seam) into %d frame(s) in %.3f s",
            face_count,
            water_faces,
            seam_faces,
            strip.frame_count,
            self.stats.seconds,
        )

