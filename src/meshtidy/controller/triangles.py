from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from meshtidy.model.topology import as_triangles

if TYPE_CHECKING:
    import numpy.typing as npt


class FlipMode(StrEnum):
    FLIP_S = "S = 1.0 - S"
    FLIP_T = "T = 1.0 - T"
    SWAP = "S <=> T"


def flip_uvs(uvs: npt.ArrayLike, mode: FlipMode) -> npt.NDArray[np.float64]:
    """Return flipped (N, 2) texture coordinates."""
    result = np.array(uvs, dtype=np.float64).reshape(-1, 2)
    match mode:
        case FlipMode.FLIP_S:
            result[:, 0] = 1.0 - result[:, 0]
        case FlipMode.FLIP_T:
            result[:, 1] = 1.0 - result[:, 1]
        case FlipMode.SWAP:
            result = result[:, ::-1].copy()
    return result


def flip_faces(triangles: npt.ArrayLike) -> npt.NDArray[np.int64]:
    """Reverse the winding of every triangle: (a, b, c) -> (a, c, b)."""
    return as_triangles(triangles)[:, [0, 2, 1]]


def flip_face(triangles: npt.ArrayLike, index: int) -> npt.NDArray[np.int64]:
    """Reverse the winding of the triangle at `index` only."""
    result = as_triangles(triangles).copy()
    result[index] = result[index, [0, 2, 1]]
    return result


def prune_triangles(triangles: npt.ArrayLike) -> npt.NDArray[np.int64]:
    """
    Remove degenerate triangles and duplicates.

    A triangle is degenerate when two corners share an index. Two triangles
    are duplicates when one is a rotation of the other (same winding); the
    first occurrence is kept. Opposite windings are different faces.
    """
    tris = as_triangles(triangles)
    seen = set()
    keep = []
    for row in tris.tolist():
        a, b, c = row
        if a == b or b == c or c == a:
            continue
        # rotate so the smallest index comes first
        k = row.index(min(row))
        key = tuple(row[k:] + row[:k])
        if key in seen:
            continue
        seen.add(key)
        keep.append(row)
    return as_triangles(keep)
