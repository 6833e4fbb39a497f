"""
Mesh Operations
===============
Applicability checks and execute functions for every operation offered to
the operator. Each execute function resolves the selection through the typed
accessors, calls into the controller layer and returns a tagged result whose
success value is the message shown to the operator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Optional, TYPE_CHECKING

from meshtidy.config import BATCH_BOUNDS_USER_VERSION_2
from meshtidy.controller.bounds import BoundsMode, compute_bounds, resolve_bounds_mode
from meshtidy.controller.correspondence import (
    decode_vertex_records, encode_vertex_records, match_by_uv
)
from meshtidy.controller.pipeline import remove_duplicate_vertices, remove_unused_vertices
from meshtidy.controller.skin_partition import REGENERATE_NOTICE
from meshtidy.controller.triangles import FlipMode, flip_face, flip_faces, flip_uvs, prune_triangles
from meshtidy.host.shape import ShapeAccessor, VertexDataAccessor, find_shape, find_tri_shape_data
from meshtidy.model.results import ErrorKind, Failure, Result, Success

if TYPE_CHECKING:
    from meshtidy.host.clipboard import Clipboard
    from meshtidy.model.store import MeshStore

logger = logging.getLogger(__name__)


@dataclass
class OperationContext:
    """Inputs an operation may need besides the store and the selection."""
    option: Optional[StrEnum] = None
    clipboard: Optional[Clipboard] = None
    # row of the selected array (e.g. one triangle)
    element: Optional[int] = None


# ----------------------------------------------------------------------
# Applicability
# ----------------------------------------------------------------------
def has_uv_sets(store: MeshStore, selection: Optional[int]) -> bool:
    return store.inherits(selection, "TriBasedGeomData") and bool(store.rows(selection, "uv_sets"))


def is_tri_shape_data(store: MeshStore, selection: Optional[int]) -> bool:
    return find_tri_shape_data(store, selection) is not None


def has_triangles(store: MeshStore, selection: Optional[int]) -> bool:
    data_id = find_tri_shape_data(store, selection)
    return data_id is not None and bool(store.rows(data_id, "triangles"))


def is_shape(store: MeshStore, selection: Optional[int]) -> bool:
    return find_shape(store, selection) is not None


def is_geometry_data(store: MeshStore, selection: Optional[int]) -> bool:
    return store.inherits(selection, "GeometryData")


def is_packed_shape(store: MeshStore, selection: Optional[int]) -> bool:
    return store.inherits(selection, "PackedTriShape") and store.get(selection, "vertex_data") is not None


def is_batch_bounds_store(store: MeshStore, selection: Optional[int]) -> bool:
    return selection is None and store.user_version_2 == BATCH_BOUNDS_USER_VERSION_2


def is_skin_partition(store: MeshStore, selection: Optional[int]) -> bool:
    return store.inherits(selection, "SkinPartition")


# ----------------------------------------------------------------------
# Triangles and UVs
# ----------------------------------------------------------------------
def run_flip_uv(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    mode = FlipMode(context.option)
    uv_sets = store.rows(selection, "uv_sets")
    store.set_array(selection, "uv_sets", [flip_uvs(uv, mode) if len(uv) else [] for uv in uv_sets])
    return Success(f"Flipped {len(uv_sets)} UV sets ({mode})")


def run_flip_faces(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    shape = ShapeAccessor(store, find_tri_shape_data(store, selection))
    triangles = shape.get_triangles()
    shape.set_triangles(flip_faces(triangles))
    return Success(f"Flipped {len(triangles)} faces")


def run_flip_face(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    shape = ShapeAccessor(store, find_tri_shape_data(store, selection))
    triangles = shape.get_triangles()
    index = context.element
    if not 0 <= index < len(triangles):
        return Failure(ErrorKind.INVALID_INDEX, f"Triangle {index} is out of range [0, {len(triangles)})")
    shape.set_triangles(flip_face(triangles, index))
    return Success(f"Flipped triangle {index}")


def run_prune_triangles(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    shape = ShapeAccessor(store, find_tri_shape_data(store, selection))
    triangles = shape.get_triangles()
    pruned = prune_triangles(triangles)
    removed = len(triangles) - len(pruned)
    if removed > 0:
        shape.set_triangles(pruned)
    return Success(f"Removed {removed} triangles")


# ----------------------------------------------------------------------
# Vertex cleanup
# ----------------------------------------------------------------------
def _cleanup_message(removed: int, partition_removed: bool) -> str:
    message = f"Removed {removed} vertices"
    if partition_removed:
        message += f". {REGENERATE_NOTICE}"
    return message


def run_remove_unused_vertices(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    match remove_unused_vertices(ShapeAccessor.for_selection(store, selection)):
        case Failure() as failure:
            return failure
        case Success(value=cleanup):
            return Success(_cleanup_message(cleanup.removed, cleanup.partition_removed))


def run_remove_duplicate_vertices(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    match remove_duplicate_vertices(ShapeAccessor.for_selection(store, selection)):
        case Failure() as failure:
            return failure
        case Success(value=cleanup):
            return Success(_cleanup_message(cleanup.removed, cleanup.partition_removed))


# ----------------------------------------------------------------------
# Bounds
# ----------------------------------------------------------------------
def run_update_center_radius(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    shape = ShapeAccessor(store, selection)
    mode = BoundsMode(context.option or BoundsMode.AUTO)
    if mode == BoundsMode.AUTO:
        mode = resolve_bounds_mode(store, shape.consistency_flags())

    bounds = compute_bounds(shape.get_attributes().positions, mode)
    if bounds is None:
        return Failure(ErrorKind.EMPTY_INPUT, "No vertices")
    shape.set_bounds(bounds)
    return Success(f"Center {bounds.center}, radius {bounds.radius:g} ({mode})")


def run_update_bounds(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    packed = VertexDataAccessor(store, selection)
    bounds = compute_bounds(packed.get_positions(), BoundsMode.CENTROID)
    if bounds is None:
        return Failure(ErrorKind.EMPTY_INPUT, "No vertices")
    packed.set_bounding_sphere(bounds)
    return Success(f"Center {bounds.center}, radius {bounds.radius:g}")


def run_update_all_bounds(store: MeshStore, selection: Optional[int], context: OperationContext) -> Result[str]:
    targets = [block_id for block_id, _ in store.blocks() if is_packed_shape(store, block_id)]
    updated = 0
    for block_id in targets:
        if run_update_bounds(store, block_id, context).ok:
            updated += 1
    return Success(f"Updated bounds of {updated} shapes")


# ----------------------------------------------------------------------
# Vertex data transplant
# ----------------------------------------------------------------------
def run_copy_vertex_data(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    if context.clipboard is None:
        raise ValueError("Copy Vertex Data requires a clipboard")
    records = VertexDataAccessor(store, selection).get_records()
    context.clipboard.set_text(encode_vertex_records(records))
    return Success(f"Exported {len(records)} vertices to the clipboard")


def run_paste_vertex_data(store: MeshStore, selection: int, context: OperationContext) -> Result[str]:
    if context.clipboard is None:
        raise ValueError("Paste Vertex Data requires a clipboard")
    target = VertexDataAccessor(store, selection)

    match decode_vertex_records(context.clipboard.text()):
        case Failure() as failure:
            return failure
        case Success(value=candidates):
            pass
    logger.debug(f"De-serialized vertex count: {len(candidates)}")

    match match_by_uv(target.get_records(), candidates):
        case Failure() as failure:
            return failure
        case Success(value=transplant):
            pass

    target.set_records(transplant.records)
    report = transplant.report
    if report.unmatched:
        details = ", ".join(f"{v.index} {v.position}" for v in report.unmatched)
        logger.warning(
            f"Couldn't paste {len(report.unmatched)} vertices, needs manual fixing. Missed vertices: {details}"
        )
    return Success(report.summary())
