"""
Index-Referencing Structures
============================
Everything that points into the vertex set by position: triangles, triangle
strips and per-bone skin weights.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def as_triangles(data) -> npt.NDArray[np.int64]:
    """Convert to an (T, 3) int array; empty input becomes a (0, 3) array."""
    array = np.asarray(data if data is not None else [], dtype=np.int64)
    if array.size == 0:
        return np.empty((0, 3), dtype=np.int64)
    return array.reshape(-1, 3)


def as_strips(data) -> List[npt.NDArray[np.int64]]:
    """Convert each strip to a 1-D int array."""
    return [np.asarray(strip, dtype=np.int64).reshape(-1) for strip in (data or [])]


@dataclass
class BoneWeights:
    """Ordered (vertex index, weight) pairs of one bone."""
    weights: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def num_vertices(self) -> int:
        return len(self.weights)

    @property
    def indices(self) -> List[int]:
        return [index for index, _ in self.weights]


@dataclass
class SkinBinding:
    """Vertex influences of every bone of a skinned shape."""
    bones: List[BoneWeights] = field(default_factory=list)

    @classmethod
    def from_pairs(cls, bones: Sequence[Sequence[Tuple[int, float]]]) -> SkinBinding:
        return cls(bones=[BoneWeights([(int(i), float(w)) for i, w in pairs]) for pairs in bones])

    def __len__(self) -> int:
        return len(self.bones)
