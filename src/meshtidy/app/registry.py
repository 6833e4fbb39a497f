"""
Operation Registry
==================
Static table of every operation offered to the operator.

The table is built once by build_registry(); nothing registers itself as a
side effect of being imported. Each entry pairs an applicability predicate
with an execute function and, where the operation has sub-modes, the fixed
enumeration the operator chooses from.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Callable, Dict, List, Optional, Union, TYPE_CHECKING

from meshtidy.app import operations as ops
from meshtidy.controller.bounds import BoundsMode
from meshtidy.controller.triangles import FlipMode
from meshtidy.model.results import ErrorKind, Failure, Result, Success

if TYPE_CHECKING:
    from meshtidy.host.clipboard import Clipboard
    from meshtidy.model.store import MeshStore

logger = logging.getLogger(__name__)

Predicate = Callable[["MeshStore", Optional[int]], bool]
Executor = Callable[["MeshStore", Optional[int], ops.OperationContext], Result[str]]


@dataclass(frozen=True)
class Operation:
    op_id: str
    name: str
    page: str
    is_applicable: Predicate
    execute: Executor
    options: Optional[type[StrEnum]] = None
    default_option: Optional[StrEnum] = None
    takes_element: bool = False


def build_registry() -> Dict[str, Operation]:
    table = [
        Operation("mesh.flip_uv", "Flip UV", "Mesh", ops.has_uv_sets, ops.run_flip_uv, options=FlipMode),
        Operation("mesh.flip_faces", "Flip Faces", "Mesh", ops.is_tri_shape_data, ops.run_flip_faces),
        Operation("mesh.flip_face", "Flip Face", "Mesh", ops.has_triangles, ops.run_flip_face, takes_element=True),
        Operation("mesh.prune_triangles", "Prune Triangles", "Mesh",
                  ops.is_tri_shape_data, ops.run_prune_triangles),
        Operation("mesh.remove_duplicate_vertices", "Remove Duplicate Vertices", "Mesh",
                  ops.is_shape, ops.run_remove_duplicate_vertices),
        Operation("mesh.remove_unused_vertices", "Remove Unused Vertices", "Mesh",
                  ops.is_shape, ops.run_remove_unused_vertices),
        Operation("mesh.update_center_radius", "Update Center/Radius", "Mesh",
                  ops.is_geometry_data, ops.run_update_center_radius,
                  options=BoundsMode, default_option=BoundsMode.AUTO),
        Operation("mesh.update_bounds", "Update Bounds", "Mesh", ops.is_packed_shape, ops.run_update_bounds),
        Operation("batch.update_all_bounds", "Update All Bounds", "Batch",
                  ops.is_batch_bounds_store, ops.run_update_all_bounds),
        Operation("mesh.copy_vertex_data", "Copy Vertex Data", "Mesh",
                  ops.is_skin_partition, ops.run_copy_vertex_data),
        Operation("mesh.paste_vertex_data", "Paste Vertex Data", "Mesh",
                  ops.is_skin_partition, ops.run_paste_vertex_data),
    ]
    return {operation.op_id: operation for operation in table}


REGISTRY: Dict[str, Operation] = build_registry()


def get_operation(op_id: str) -> Operation:
    operation = REGISTRY.get(op_id)
    if not operation:
        raise KeyError(f"No operation registered for id '{op_id}'")
    return operation


def list_ids() -> List[str]:
    return list(REGISTRY.keys())


def applicable(store: MeshStore, selection: Optional[int]) -> List[str]:
    """Ids of the operations that can run on the selection, in menu order."""
    return [op_id for op_id, operation in REGISTRY.items() if operation.is_applicable(store, selection)]


def _resolve_option(operation: Operation, option: Union[str, StrEnum, None]) -> Optional[StrEnum]:
    if operation.options is None:
        if option is not None:
            raise ValueError(f"Operation '{operation.op_id}' takes no option")
        return None
    if option is None:
        if operation.default_option is None:
            choices = ", ".join(f"'{m.value}'" for m in operation.options)
            raise ValueError(f"Operation '{operation.op_id}' requires one of: {choices}")
        return operation.default_option
    try:
        return operation.options(option)
    except ValueError:
        pass
    # accept member names too (e.g. FLIP_S)
    name = str(option).upper().replace("-", "_").replace(" ", "_")
    if name in operation.options.__members__:
        return operation.options[name]
    raise ValueError(f"Unknown option '{option}' for operation '{operation.op_id}'")


def run(
    op_id: str,
    store: MeshStore,
    selection: Optional[int],
    option: Union[str, StrEnum, None] = None,
    clipboard: Optional[Clipboard] = None,
    element: Optional[int] = None,
) -> Result[str]:
    """
    Run an operation on the selection and report the outcome through the logger.

    `element` picks one row of the selected array, for operations that work on
    a single triangle.

    EmptyInput is a harmless no-op and is logged at INFO; other failures are
    logged as warnings. Either way the store is unchanged on failure.
    """
    operation = get_operation(op_id)
    if not operation.is_applicable(store, selection):
        raise ValueError(f"Operation '{operation.name}' is not applicable to selection {selection}")
    if operation.takes_element and element is None:
        raise ValueError(f"Operation '{operation.name}' requires an element index")
    if not operation.takes_element and element is not None:
        raise ValueError(f"Operation '{operation.name}' works on the whole block, not on element {element}")

    context = ops.OperationContext(
        option=_resolve_option(operation, option),
        clipboard=clipboard,
        element=element,
    )
    logger.debug(f"Running '{operation.name}' on {selection}")
    result = operation.execute(store, selection, context)

    match result:
        case Success(value=message):
            logger.info(f"{operation.name}: {message}")
        case Failure(kind=ErrorKind.EMPTY_INPUT, message=message):
            logger.info(f"{operation.name}: nothing to do ({message})")
        case Failure(kind=kind, message=message):
            logger.warning(f"There were errors during '{operation.name}': {kind}: {message}")
    return result
