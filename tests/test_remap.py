import numpy as np

from meshtidy.controller.remap import remap_skin_binding, remap_strips, remap_triangles
from meshtidy.model.topology import SkinBinding


def test_unmapped_face_indices_are_left_unchanged():
    triangles = np.array([[0, 1, 2], [2, 3, 4]])
    result = remap_triangles(triangles, {3: 1, 4: 0})
    assert result.tolist() == [[0, 1, 2], [2, 1, 0]]
    # input untouched
    assert triangles.tolist() == [[0, 1, 2], [2, 3, 4]]


def test_strips_keep_their_lengths():
    strips = [np.array([0, 1, 2, 3]), np.array([5, 6, 7])]
    result = remap_strips(strips, {5: 2, 6: 3, 7: 4})
    assert [s.tolist() for s in result] == [[0, 1, 2, 3], [2, 3, 4]]


def test_skin_weights_for_removed_vertices_are_dropped():
    binding = SkinBinding.from_pairs([
        [(0, 0.5), (1, 0.25), (3, 1.0)],
        [(1, 0.75)],
        [(2, 0.1), (4, 0.9)],
    ])
    mapping = {0: 0, 2: 1, 4: 2}

    result = remap_skin_binding(binding, mapping)

    assert [bone.weights for bone in result.bones] == [
        [(0, 0.5)],
        [],
        [(1, 0.1), (2, 0.9)],
    ]
    assert [bone.num_vertices for bone in result.bones] == [1, 0, 2]
    for bone in result.bones:
        assert all(index < 3 for index in bone.indices)
