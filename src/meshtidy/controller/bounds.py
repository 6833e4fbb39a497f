from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, TYPE_CHECKING

import numpy as np

from meshtidy.config import BOX_CENTER_FLAG, LEGACY_USER_VERSION, LEGACY_VERSION_MASK

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshtidy.model.store import MeshStore


class BoundsMode(StrEnum):
    """Center algorithm of a bounding sphere."""
    AUTO = "auto"
    CENTROID = "centroid"
    BOX_CENTER = "box center"


@dataclass(frozen=True)
class Bounds:
    center: tuple[float, float, float]
    radius: float


def resolve_bounds_mode(store: MeshStore, consistency_flags: int = 0) -> BoundsMode:
    """
    Pick the center algorithm for a geometry data block.

    Legacy stores (version bits 0x14000000 with user version 11) and blocks with
    consistency flag 0x8000 use the bounding-box center, everything else the
    centroid.
    """
    legacy = bool(store.version & LEGACY_VERSION_MASK) and store.user_version == LEGACY_USER_VERSION
    if legacy or (consistency_flags & BOX_CENTER_FLAG):
        return BoundsMode.BOX_CENTER
    return BoundsMode.CENTROID


def compute_bounds(positions: npt.ArrayLike, mode: BoundsMode = BoundsMode.CENTROID) -> Optional[Bounds]:
    """
    Compute a bounding sphere around the given positions.

    Args:
        positions: (N, 3) vertex positions.
        mode: CENTROID uses the mean position as center, BOX_CENTER the middle of
              the per-axis extents. The radius is the largest distance from the
              center in both cases.

    Returns:
        The bounds, or None for an empty vertex set (prior bounds stay as they are).
    """
    if mode == BoundsMode.AUTO:
        raise ValueError("BoundsMode.AUTO must be resolved before computing bounds")

    points = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        return None

    match mode:
        case BoundsMode.BOX_CENTER:
            center = (points.min(axis=0) + points.max(axis=0)) / 2.0
        case _:
            center = points.mean(axis=0)

    radius = float(np.linalg.norm(points - center, axis=1).max())
    return Bounds(center=tuple(float(c) for c in center), radius=radius)
