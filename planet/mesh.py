"""Read-only triangle mesh and the geodesic sphere the textures are baked for."""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


_T = (1.0 + math.sqrt(5.0)) / 2.0

ICOSAHEDRON_VERTICES = np.array(
    [
        [-1.0, _T, 0.0],
        [1.0, _T, 0.0],
        [-1.0, -_T, 0.0],
        [1.0, -_T, 0.0],
        [0.0, -1.0, _T],
        [0.0, 1.0, _T],
        [0.0, -1.0, -_T],
        [0.0, 1.0, -_T],
        [_T, 0.0, -1.0],
        [_T, 0.0, 1.0],
        [-_T, 0.0, -1.0],
        [-_T, 0.0, 1.0],
    ],
    dtype=np.float64,
)

ICOSAHEDRON_FACES = np.array(
    [
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
    ],
    dtype=np.int64,
)

_EXACT_EPS = 1e-12


@dataclass(frozen=True, eq=False)
class Mesh:
    """Triangle mesh with per-vertex positions, UVs and an optional index buffer."""

    positions: np.ndarray
    uvs: np.ndarray
    index: np.ndarray | None = None

    def __post_init__(self) -> None:
        positions = np.array(self.positions, dtype=np.float64)
        uvs = np.array(self.uvs, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError("positions must have shape (N, 3)")
        if uvs.ndim != 2 or uvs.shape[1] != 2:
            raise ValueError("uvs must have shape (N, 2)")
        if positions.shape[0] != uvs.shape[0]:
            raise ValueError("positions and uvs must describe the same vertices")
        positions.setflags(write=False)
        uvs.setflags(write=False)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "uvs", uvs)

        if self.index is not None:
            index = np.array(self.index, dtype=np.int64).ravel()
            if index.size and (index.min() < 0 or index.max() >= positions.shape[0]):
                raise ValueError("index buffer references missing vertices")
            index.setflags(write=False)
            object.__setattr__(self, "index", index)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def is_indexed(self) -> bool:
        return self.index is not None


def azimuth(points: np.ndarray) -> np.ndarray:
    return np.arctan2(points[..., 2], -points[..., 0])


def inclination(points: np.ndarray) -> np.ndarray:
    return np.arctan2(-points[..., 1], np.hypot(points[..., 0], points[..., 2]))


def spherical_uvs(points: np.ndarray) -> np.ndarray:
    """Equirectangular UVs for points on a sphere centred at the origin."""

    u = azimuth(points) / 2.0 / math.pi + 0.5
    v = inclination(points) / math.pi + 0.5
    return np.stack((u, v), axis=-1)


def _subdivide_face(a: np.ndarray, b: np.ndarray, c: np.ndarray, detail: int) -> list[np.ndarray]:
    cols = detail + 1
    grid: list[list[np.ndarray]] = []
    for i in range(cols + 1):
        aj = a + (c - a) * (i / cols)
        bj = b + (c - b) * (i / cols)
        rows = cols - i
        row: list[np.ndarray] = []
        for j in range(rows + 1):
            if j == 0 and i == cols:
                row.append(aj)
            else:
                row.append(aj + (bj - aj) * (j / rows))
        grid.append(row)

    out: list[np.ndarray] = []
    for i in range(cols):
        for j in range(2 * (cols - i) - 1):
            k = j // 2
            if j % 2 == 0:
                out.extend((grid[i][k + 1], grid[i + 1][k], grid[i][k]))
            else:
                out.extend((grid[i][k + 1], grid[i + 1][k + 1], grid[i + 1][k]))
    return out


def _correct_uvs(positions: np.ndarray, uvs: np.ndarray) -> None:
    tris = positions.reshape(-1, 3, 3)
    tri_uvs = uvs.reshape(-1, 3, 2)
    centroid_azimuth = azimuth(tris.mean(axis=1))[:, None].repeat(3, axis=1)

    # Vertices on the back meridian read u == 1 even when their face sits left of it.
    on_meridian = (centroid_azimuth < 0) & (np.abs(tri_uvs[..., 0] - 1.0) < _EXACT_EPS)
    tri_uvs[..., 0] = np.where(on_meridian, tri_uvs[..., 0] - 1.0, tri_uvs[..., 0])

    at_pole = (np.abs(tris[..., 0]) < _EXACT_EPS) & (np.abs(tris[..., 2]) < _EXACT_EPS)
    tri_uvs[..., 0] = np.where(at_pole, centroid_azimuth / 2.0 / math.pi + 0.5, tri_uvs[..., 0])


def _correct_seam(uvs: np.ndarray) -> None:
    tri_u = uvs.reshape(-1, 3, 2)[..., 0]
    spans_seam = (tri_u.max(axis=1) > 0.9) & (tri_u.min(axis=1) < 0.1)
    wrap = spans_seam[:, None] & (tri_u < 0.2)
    tri_u[wrap] += 1.0


def icosahedron_mesh(radius: float = 1.0, detail: int = 0, *, indexed: bool = False) -> Mesh:
    """Build a geodesic sphere by subdividing an icosahedron.

    The non-indexed form stores three vertices per face so UVs can be corrected
    per face; faces crossing the u=0/u=1 seam get u values above 1 on their
    left-hand vertices. The indexed form shares the twelve base vertices and is
    only available without subdivision.
    """

    if radius <= 0:
        raise ValueError("radius must be positive")
    if detail < 0:
        raise ValueError("detail must be >= 0")

    base = ICOSAHEDRON_VERTICES / np.linalg.norm(ICOSAHEDRON_VERTICES, axis=1, keepdims=True)

    if indexed:
        if detail != 0:
            raise ValueError("indexed icosahedron is only available at detail 0")
        return Mesh(base * radius, spherical_uvs(base), ICOSAHEDRON_FACES.ravel())

    vertices: list[np.ndarray] = []
    for a, b, c in ICOSAHEDRON_FACES:
        vertices.extend(_subdivide_face(base[a], base[b], base[c], detail))
    positions = np.asarray(vertices, dtype=np.float64)
    positions = positions / np.linalg.norm(positions, axis=1, keepdims=True)

    uvs = spherical_uvs(positions)
    _correct_uvs(positions, uvs)
    _correct_seam(uvs)
    return Mesh(positions * radius, uvs)
