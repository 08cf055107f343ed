from __future__ import annotations

import numpy as np
import pytest

from planet.faces import face_indices, for_each_face, iter_faces
from planet.mesh import Mesh, icosahedron_mesh


def test_indexed_icosahedron_has_twelve_vertices_and_twenty_faces() -> None:
    mesh = icosahedron_mesh(indexed=True)

    assert mesh.is_indexed
    assert mesh.vertex_count == 12
    assert face_indices(mesh).shape == (20, 3)


def test_subdivided_icosahedron_vertex_count() -> None:
    mesh = icosahedron_mesh(2.0, 2)

    assert not mesh.is_indexed
    assert mesh.vertex_count == 20 * 9 * 3
    assert np.allclose(np.linalg.norm(mesh.positions, axis=1), 2.0)


def test_uvs_are_seam_corrected() -> None:
    mesh = icosahedron_mesh(1.0, 3)
    tri_u = mesh.uvs[:, 0].reshape(-1, 3)

    assert mesh.uvs[:, 1].min() >= 0.0
    assert mesh.uvs[:, 1].max() <= 1.0
    assert tri_u.max() > 1.0
    spans_seam = (tri_u.max(axis=1) > 0.9) & (tri_u.min(axis=1) < 0.1)
    assert not spans_seam.any()


def test_indexed_subdivision_is_rejected() -> None:
    with pytest.raises(ValueError):
        icosahedron_mesh(1.0, 1, indexed=True)


def test_mesh_rejects_mismatched_attributes() -> None:
    with pytest.raises(ValueError):
        Mesh(np.zeros((4, 3)), np.zeros((3, 2)))


def test_mesh_attributes_are_read_only() -> None:
    mesh = icosahedron_mesh()

    with pytest.raises(ValueError):
        mesh.positions[0, 0] = 5.0


def test_non_indexed_faces_group_consecutive_vertices() -> None:
    mesh = Mesh(np.arange(18, dtype=float).reshape(6, 3), np.zeros((6, 2)))

    assert face_indices(mesh).tolist() == [[0, 1, 2], [3, 4, 5]]


def test_indexed_faces_group_consecutive_indices() -> None:
    mesh = Mesh(np.zeros((4, 3)), np.zeros((4, 2)), np.array([3, 2, 1, 0, 1, 2]))

    assert face_indices(mesh).tolist() == [[3, 2, 1], [0, 1, 2]]


def test_trailing_partial_face_is_ignored() -> None:
    plain = Mesh(np.zeros((7, 3)), np.zeros((7, 2)))
    indexed = Mesh(np.zeros((4, 3)), np.zeros((4, 2)), np.array([0, 1, 2, 3, 0]))

    assert face_indices(plain).shape == (2, 3)
    assert face_indices(indexed).shape == (1, 3)


def test_walker_yields_positions_and_uvs_in_stable_order() -> None:
    mesh = icosahedron_mesh(indexed=True)
    seen: list[tuple[int, ...]] = []

    count = for_each_face(mesh, lambda face: seen.append(tuple(v.index for v in face.vertices)))

    assert count == 20
    assert seen == [tuple(row) for row in face_indices(mesh).tolist()]
    first = next(iter_faces(mesh))
    corner = first.vertices[1]
    assert np.array_equal(corner.position, mesh.positions[corner.index])
    assert np.array_equal(corner.uv, mesh.uvs[corner.index])
