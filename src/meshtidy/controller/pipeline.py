"""
Vertex Cleanup Pipelines
========================
Composes the core components into the two vertex-removal flows.

Both flows share one compaction path; they only differ in where the set of
vertices to keep comes from:

    remove_unused_vertices:    usage -> compact -> remap -> guard
    remove_duplicate_vertices: duplicates -> remap faces/strips
                               -> usage -> compact -> remap -> guard

Everything is read from the shape up front and validated before the first
write, so a failure leaves the store exactly as it was.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, TYPE_CHECKING

import numpy as np

from meshtidy.controller.compactor import compact
from meshtidy.controller.duplicates import find_duplicates
from meshtidy.controller.remap import remap_skin_binding, remap_strips, remap_triangles
from meshtidy.controller.skin_partition import drop_stale_partition
from meshtidy.controller.usage import find_used_vertices
from meshtidy.model.attributes import AttributeArraySet
from meshtidy.model.results import ErrorKind, Failure, Result, Success

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshtidy.host.shape import ShapeAccessor

logger = logging.getLogger(__name__)


@dataclass
class VertexCleanup:
    """Outcome of a cleanup run."""
    removed: int
    remaining: int
    merged: int = 0
    partition_removed: bool = False


def _read_validated(shape: ShapeAccessor) -> Result[AttributeArraySet]:
    attributes = shape.get_attributes()
    if attributes.is_empty:
        return Failure(ErrorKind.EMPTY_INPUT, "No vertices")
    failure = attributes.validate(expected=shape.num_vertices())
    if failure is not None:
        return failure
    return Success(attributes)


def _compact_shape(
    shape: ShapeAccessor,
    attributes: AttributeArraySet,
    triangles: npt.NDArray[np.int64],
    strips: List[npt.NDArray[np.int64]],
    merged: int = 0,
) -> Result[VertexCleanup]:
    match find_used_vertices(triangles, strips, len(attributes)):
        case Failure() as failure:
            return failure
        case Success(value=used):
            pass

    removed = len(attributes) - len(used)
    if removed == 0:
        logger.info("Removed 0 vertices")
        return Success(VertexCleanup(removed=0, remaining=len(attributes), merged=merged))

    match compact(attributes, used):
        case Failure() as failure:
            return failure
        case Success(value=compaction):
            pass

    new_triangles = remap_triangles(triangles, compaction.mapping)
    new_strips = remap_strips(strips, compaction.mapping)
    new_binding = remap_skin_binding(shape.get_skin_binding(), compaction.mapping)

    # validation is over, write back only the arrays the data block carries;
    # strips data keeps its own triangle count
    if shape.has_triangles():
        shape.set_triangles(new_triangles)
    if shape.has_strips():
        shape.set_strips(new_strips)
    shape.set_attributes(compaction.attributes)
    shape.set_skin_binding(new_binding)
    partition_removed = drop_stale_partition(shape)

    logger.info(f"Removed {removed} vertices")
    return Success(VertexCleanup(
        removed=removed,
        remaining=len(compaction.attributes),
        merged=merged,
        partition_removed=partition_removed,
    ))


def remove_unused_vertices(shape: ShapeAccessor) -> Result[VertexCleanup]:
    """Remove vertices no triangle or strip references, remapping all references."""
    match _read_validated(shape):
        case Failure() as failure:
            return failure
        case Success(value=attributes):
            pass

    return _compact_shape(shape, attributes, shape.get_triangles(), shape.get_strips())


def remove_duplicate_vertices(shape: ShapeAccessor) -> Result[VertexCleanup]:
    """
    Merge vertices with identical attributes into their lowest-index twin, then
    remove the slots that became unused.
    """
    match _read_validated(shape):
        case Failure() as failure:
            return failure
        case Success(value=attributes):
            pass

    match find_duplicates(attributes):
        case Failure() as failure:
            return failure
        case Success(value=duplicates):
            pass

    logger.debug(f"Merging {len(duplicates)} duplicate vertices")
    triangles = remap_triangles(shape.get_triangles(), duplicates)
    strips = remap_strips(shape.get_strips(), duplicates)
    return _compact_shape(shape, attributes, triangles, strips, merged=len(duplicates))
