"""
Per-Vertex Attribute Arrays
===========================
Defines the parallel arrays that describe a vertex set and the flat record
used when vertices are exchanged with another mesh.

Classes:
    AttributeArraySet: Positions, normals, colors and UV sets sharing one length.
    VertexRecord: One vertex of the interchange format.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from meshtidy.model.results import ErrorKind, Failure

if TYPE_CHECKING:
    import numpy.typing as npt


def _as_rows(data, width: int) -> npt.NDArray[np.float64]:
    """Convert to a float (N, width) array; empty input becomes a (0, width) array."""
    array = np.asarray(data if data is not None else [], dtype=np.float64)
    if array.size == 0:
        return np.empty((0, width), dtype=np.float64)
    return array.reshape(-1, width)


@dataclass
class AttributeArraySet:
    """
    Bundle of per-vertex arrays.

    The vertex count N is the number of positions. Normals and colors are
    optional: an empty array means "not present". Every present array must
    have exactly N rows, see validate().
    """
    positions: npt.NDArray[np.float64]
    normals: npt.NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 3)))
    colors: npt.NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 4)))
    uv_sets: List[npt.NDArray[np.float64]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.positions = _as_rows(self.positions, 3)
        self.normals = _as_rows(self.normals, 3)
        self.colors = _as_rows(self.colors, 4)
        self.uv_sets = [_as_rows(uv, 2) for uv in self.uv_sets]

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def is_empty(self) -> bool:
        return len(self.positions) == 0

    @property
    def has_normals(self) -> bool:
        return len(self.normals) > 0

    @property
    def has_colors(self) -> bool:
        return len(self.colors) > 0

    def validate(self, expected: Optional[int] = None) -> Optional[Failure]:
        """
        Check the shared length invariant.

        Args:
            expected: Vertex count recorded by the host, if any.

        Returns:
            None when all arrays agree, otherwise a SizeMismatch failure.
        """
        n = len(self.positions)
        if expected is not None and expected != n:
            return Failure(ErrorKind.SIZE_MISMATCH,
                           f"Vertex count field is {expected} but there are {n} vertices")
        if self.has_normals and len(self.normals) != n:
            return Failure(ErrorKind.SIZE_MISMATCH,
                           f"Normal array has {len(self.normals)} entries, expected {n}")
        if self.has_colors and len(self.colors) != n:
            return Failure(ErrorKind.SIZE_MISMATCH,
                           f"Color array has {len(self.colors)} entries, expected {n}")
        for i, uv in enumerate(self.uv_sets):
            if len(uv) != n:
                return Failure(ErrorKind.SIZE_MISMATCH,
                               f"UV set {i} has {len(uv)} entries, expected {n}")
        return None

    def take(self, indices: Sequence[int]) -> AttributeArraySet:
        """Return a new set holding the given rows, in the given order."""
        idx = np.asarray(indices, dtype=np.int64)
        return AttributeArraySet(
            positions=self.positions[idx],
            normals=self.normals[idx] if self.has_normals else self.normals.copy(),
            colors=self.colors[idx] if self.has_colors else self.colors.copy(),
            uv_sets=[uv[idx] for uv in self.uv_sets],
        )


@dataclass
class VertexRecord:
    """A vertex as exchanged through the clipboard."""
    position: npt.NDArray[np.float64]
    uv: npt.NDArray[np.float64]
    normal: Optional[npt.NDArray[np.float64]] = None

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)
        self.uv = np.asarray(self.uv, dtype=np.float64).reshape(2)
        if self.normal is not None:
            self.normal = np.asarray(self.normal, dtype=np.float64).reshape(3)
