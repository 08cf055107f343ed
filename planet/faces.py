"""Walk a mesh's triangles in a stable order."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterator

import numpy as np

from planet.mesh import Mesh

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class VertexRef:
    """One corner of a face: its vertex index, 3D position and UV."""

    index: int
    position: np.ndarray
    uv: np.ndarray


@dataclass(frozen=True)
class Face:
    """A triangle visited by the walker, numbered in walk order."""

    index: int
    vertices: tuple[VertexRef, VertexRef, VertexRef]


def face_indices(mesh: Mesh) -> np.ndarray:
    """Return an (F, 3) array of vertex indices, one row per complete face.

    Indexed meshes are grouped by consecutive index triples, others by
    consecutive vertex triples. A trailing partial face is dropped.
    """

    source = mesh.index if mesh.index is not None else np.arange(mesh.vertex_count, dtype=np.int64)
    remainder = source.size % 3
    if remainder:
        logger.debug("Ignoring %d trailing vertex reference(s) of a partial face", remainder)
        source = source[: source.size - remainder]
    return source.reshape(-1, 3)


def iter_faces(mesh: Mesh) -> Iterator[Face]:
    for face_id, corners in enumerate(face_indices(mesh)):
        refs = tuple(VertexRef(int(i), mesh.positions[i], mesh.uvs[i]) for i in corners)
        yield Face(face_id, refs)  # type: ignore[arg-type]


def for_each_face(mesh: Mesh, visit: Callable[[Face], None]) -> int:
    """Call `visit` once per face and return the number of faces visited."""

    count = 0
    for face in iter_faces(mesh):
        visit(face)
        count += 1
    return count
