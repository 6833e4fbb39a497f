import numpy as np
import pytest

from meshtidy.controller.triangles import FlipMode, flip_face, flip_faces, flip_uvs, prune_triangles


def test_flip_faces_reverses_winding_and_is_an_involution():
    triangles = np.array([[0, 1, 2], [3, 4, 5]])
    flipped = flip_faces(triangles)
    assert flipped.tolist() == [[0, 2, 1], [3, 5, 4]]
    assert np.array_equal(flip_faces(flipped), triangles)


def test_flip_face_only_touches_the_given_triangle():
    triangles = np.array([[0, 1, 2], [3, 4, 5]])
    assert flip_face(triangles, 0).tolist() == [[0, 2, 1], [3, 4, 5]]
    assert triangles.tolist() == [[0, 1, 2], [3, 4, 5]]


def test_prune_removes_degenerate_and_rotated_duplicates():
    triangles = [
        [0, 1, 2],
        [1, 1, 2],  # degenerate
        [1, 2, 0],  # rotation of the first
        [2, 0, 1],  # rotation of the first
        [0, 2, 1],  # opposite winding, kept
        [3, 4, 3],  # degenerate
    ]
    assert prune_triangles(triangles).tolist() == [[0, 1, 2], [0, 2, 1]]


def test_prune_of_clean_mesh_is_identity():
    triangles = np.array([[0, 1, 2], [2, 1, 3]])
    assert np.array_equal(prune_triangles(triangles), triangles)


@pytest.mark.parametrize("mode, expected", [
    (FlipMode.FLIP_S, [[0.75, 0.5], [1.0, 0.0]]),
    (FlipMode.FLIP_T, [[0.25, 0.5], [0.0, 1.0]]),
    (FlipMode.SWAP, [[0.5, 0.25], [0.0, 0.0]]),
])
def test_flip_uv_modes(mode, expected):
    uvs = np.array([[0.25, 0.5], [0.0, 0.0]])
    assert flip_uvs(uvs, mode).tolist() == expected


def test_flip_s_twice_restores_coordinates():
    uvs = np.array([[0.25, 0.5], [0.125, 1.0]])
    assert np.array_equal(flip_uvs(flip_uvs(uvs, FlipMode.FLIP_S), FlipMode.FLIP_S), uvs)
