from __future__ import annotations

from typing import Sequence, Set, TYPE_CHECKING

import numpy as np

from meshtidy.model.results import ErrorKind, Failure, Result, Success

if TYPE_CHECKING:
    import numpy.typing as npt


def find_used_vertices(
    triangles: npt.NDArray[np.int64],
    strips: Sequence[npt.NDArray[np.int64]],
    num_vertices: int,
) -> Result[Set[int]]:
    """
    Collect the vertex indices referenced by any triangle corner or strip element.

    Args:
        triangles: (T, 3) corner indices.
        strips: Triangle strips, each a 1-D index array.
        num_vertices: Size N of the vertex set.

    Returns:
        Success with the set of used indices, or an InvalidIndex failure when a
        reference falls outside [0, N).
    """
    referenced = [np.asarray(triangles, dtype=np.int64).reshape(-1)]
    referenced.extend(np.asarray(strip, dtype=np.int64).reshape(-1) for strip in strips)
    flat = np.concatenate(referenced) if referenced else np.empty(0, dtype=np.int64)

    if flat.size and (flat.min() < 0 or flat.max() >= num_vertices):
        bad = int(flat[(flat < 0) | (flat >= num_vertices)][0])
        return Failure(ErrorKind.INVALID_INDEX,
                       f"Index {bad} is out of range for {num_vertices} vertices")

    return Success({int(i) for i in np.unique(flat)})
