"""
Index Remapping
===============
Applies an old -> new vertex index mapping to every structure that references
vertices by position.

Faces and strips keep indices that have no mapping entry unchanged; skin
weights for unmapped vertices are dropped.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, TYPE_CHECKING

import numpy as np

from meshtidy.model.topology import BoneWeights, SkinBinding, as_triangles

if TYPE_CHECKING:
    import numpy.typing as npt

IndexMapping = Dict[int, int]


def _remap_array(indices: npt.NDArray[np.int64], mapping: IndexMapping) -> npt.NDArray[np.int64]:
    result = np.array(indices, dtype=np.int64, copy=True)
    flat = result.reshape(-1)
    for pos, old in enumerate(flat.tolist()):
        new = mapping.get(old)
        if new is not None:
            flat[pos] = new
    return result


def remap_triangles(triangles: npt.NDArray[np.int64], mapping: IndexMapping) -> npt.NDArray[np.int64]:
    """Return a new (T, 3) array with every mapped corner replaced."""
    return _remap_array(as_triangles(triangles), mapping)


def remap_strips(
    strips: Sequence[npt.NDArray[np.int64]],
    mapping: IndexMapping,
) -> List[npt.NDArray[np.int64]]:
    """Return new strips with every mapped element replaced."""
    return [_remap_array(np.asarray(strip, dtype=np.int64).reshape(-1), mapping) for strip in strips]


def remap_skin_binding(binding: SkinBinding, mapping: IndexMapping) -> SkinBinding:
    """
    Rewrite the vertex index of every weight pair.

    Pairs whose vertex has no mapping entry are removed, so each bone's vertex
    count shrinks to the number of surviving pairs.
    """
    bones = []
    for bone in binding.bones:
        bones.append(BoneWeights([
            (mapping[index], weight)
            for index, weight in bone.weights
            if index in mapping
        ]))
    return SkinBinding(bones=bones)
