"""
Typed Shape Access
==================
Adapters giving the algorithms one method per semantic field of the block
store, so that no algorithm ever looks a field up by name.

Classes:
    ShapeAccessor: A triangle-based shape and its geometry data block.
    VertexDataAccessor: A block carrying packed per-vertex records
                        (packed shapes and skin partitions).

Functions:
    find_shape: Resolve a selection to its shape block.
    find_tri_shape_data: Resolve a selection to a TriShapeData block.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from meshtidy.config import VERTEX_FLAG_NORMALS
from meshtidy.model.attributes import AttributeArraySet, VertexRecord
from meshtidy.model.topology import SkinBinding, BoneWeights, as_strips, as_triangles

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshtidy.controller.bounds import Bounds
    from meshtidy.model.store import MeshStore

logger = logging.getLogger(__name__)

SHAPE_TYPES = ("TriShape", "LODTriShape", "TriStrips")


def find_shape(store: MeshStore, block_id: Optional[int]) -> Optional[int]:
    """
    Resolve a selection to a triangle-based shape that links valid geometry data.

    Selecting the geometry data block resolves to the shape that owns it.
    """
    if block_id is None or block_id not in store:
        return None

    shape_id: Optional[int] = block_id
    if store.inherits(block_id, "TriBasedGeomData"):
        owners = store.parents(block_id, "data")
        shape_id = owners[0] if owners else None

    if store.inherits(shape_id, *SHAPE_TYPES) and store.link(shape_id, "data", "TriBasedGeomData") is not None:
        return shape_id
    return None


def find_tri_shape_data(store: MeshStore, block_id: Optional[int]) -> Optional[int]:
    """Resolve a selection (shape or data) to a TriShapeData block."""
    if block_id is None or block_id not in store:
        return None
    data_id: Optional[int] = block_id
    if store.inherits(block_id, "TriShape"):
        data_id = store.link(block_id, "data")
    if store.inherits(data_id, "TriShapeData"):
        return data_id
    return None


class ShapeAccessor:
    """Typed view of a shape block, its geometry data and its skin blocks."""

    def __init__(self, store: MeshStore, data_id: int, shape_id: Optional[int] = None) -> None:
        self.store = store
        self.data_id = data_id
        self.shape_id = shape_id

    @classmethod
    def for_selection(cls, store: MeshStore, block_id: Optional[int]) -> Optional[ShapeAccessor]:
        shape_id = find_shape(store, block_id)
        if shape_id is None:
            return None
        return cls(store, store.link(shape_id, "data"), shape_id)

    # ------------------------------------------------------------------
    # Vertex attributes
    # ------------------------------------------------------------------
    def num_vertices(self) -> int:
        return int(self.store.get(self.data_id, "num_vertices", 0))

    def get_attributes(self) -> AttributeArraySet:
        return AttributeArraySet(
            positions=self.store.rows(self.data_id, "vertices"),
            normals=self.store.rows(self.data_id, "normals"),
            colors=self.store.rows(self.data_id, "vertex_colors"),
            uv_sets=self.store.rows(self.data_id, "uv_sets"),
        )

    def set_attributes(self, attributes: AttributeArraySet) -> None:
        self.store.set(self.data_id, "num_vertices", len(attributes))
        for name, array in (
            ("vertices", attributes.positions),
            ("normals", attributes.normals),
            ("vertex_colors", attributes.colors),
        ):
            self.store.resize(self.data_id, name, len(array))
            self.store.set_array(self.data_id, name, array)

        self.store.resize(self.data_id, "uv_sets", len(attributes.uv_sets))
        self.store.set_array(self.data_id, "uv_sets", [uv.tolist() for uv in attributes.uv_sets])

    # ------------------------------------------------------------------
    # Faces and strips
    # ------------------------------------------------------------------
    def has_triangles(self) -> bool:
        fields = self.store.block(self.data_id).fields
        return self.store.inherits(self.data_id, "TriShapeData") or "triangles" in fields

    def has_strips(self) -> bool:
        fields = self.store.block(self.data_id).fields
        return self.store.inherits(self.data_id, "TriStripsData") or "points" in fields

    def get_triangles(self) -> npt.NDArray[np.int64]:
        return as_triangles(self.store.rows(self.data_id, "triangles"))

    def set_triangles(self, triangles: npt.NDArray[np.int64]) -> None:
        triangles = as_triangles(triangles)
        self.store.set(self.data_id, "num_triangles", len(triangles))
        self.store.set(self.data_id, "num_triangle_points", len(triangles) * 3)
        self.store.resize(self.data_id, "triangles", len(triangles))
        self.store.set_array(self.data_id, "triangles", triangles)

    def get_strips(self) -> List[npt.NDArray[np.int64]]:
        return as_strips(self.store.rows(self.data_id, "points"))

    def set_strips(self, strips: Sequence[npt.NDArray[np.int64]]) -> None:
        self.store.resize(self.data_id, "points", len(strips))
        self.store.set_array(self.data_id, "points", [np.asarray(s).tolist() for s in strips])

    # ------------------------------------------------------------------
    # Skinning
    # ------------------------------------------------------------------
    def skin_instance(self) -> Optional[int]:
        return self.store.link(self.shape_id, "skin_instance", "SkinInstance")

    def skin_data(self) -> Optional[int]:
        return self.store.link(self.skin_instance(), "data", "SkinData")

    def get_skin_binding(self) -> SkinBinding:
        skin_data = self.skin_data()
        if skin_data is None:
            return SkinBinding()
        bones = []
        for row in self.store.rows(skin_data, "bone_list"):
            bones.append(BoneWeights([
                (int(w["index"]), float(w["weight"])) for w in row.get("vertex_weights", [])
            ]))
        return SkinBinding(bones=bones)

    def set_skin_binding(self, binding: SkinBinding) -> None:
        skin_data = self.skin_data()
        if skin_data is None:
            return
        rows = self.store.rows(skin_data, "bone_list")
        if len(rows) != len(binding):
            raise ValueError(f"Skin data has {len(rows)} bones, binding has {len(binding)}")
        updated = []
        for row, bone in zip(rows, binding.bones):
            updated.append({
                **row,
                "num_vertices": bone.num_vertices,
                "vertex_weights": [{"index": i, "weight": w} for i, w in bone.weights],
            })
        self.store.set_array(skin_data, "bone_list", updated)

    def find_skin_partition(self) -> Optional[int]:
        """The partition linked from the skin instance, else from the skin data."""
        partition = self.store.link(self.skin_instance(), "skin_partition", "SkinPartition")
        if partition is None:
            partition = self.store.link(self.skin_data(), "skin_partition", "SkinPartition")
        return partition

    def delete_block(self, block_id: int) -> None:
        self.store.remove_block(block_id)

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------
    def consistency_flags(self) -> int:
        return int(self.store.get(self.data_id, "consistency_flags", 0))

    def set_bounds(self, bounds: Bounds) -> None:
        self.store.set(self.data_id, "center", list(bounds.center))
        self.store.set(self.data_id, "radius", bounds.radius)


class VertexDataAccessor:
    """
    Typed view of packed per-vertex records ("vertex_data" rows).

    Used for packed shapes (positions plus a bounding sphere) and for skin
    partitions (the target of vertex data transplants).
    """

    def __init__(self, store: MeshStore, block_id: int) -> None:
        self.store = store
        self.block_id = block_id

    @property
    def has_normals(self) -> bool:
        return bool(int(self.store.get(self.block_id, "vertex_flags", 0)) & VERTEX_FLAG_NORMALS)

    def num_vertices(self) -> int:
        return len(self.store.rows(self.block_id, "vertex_data"))

    def get_positions(self) -> npt.NDArray[np.float64]:
        rows = self.store.rows(self.block_id, "vertex_data")
        return np.array([row["vertex"] for row in rows], dtype=np.float64).reshape(-1, 3)

    def get_records(self) -> List[VertexRecord]:
        records = []
        for row in self.store.rows(self.block_id, "vertex_data"):
            normal = row.get("normal") if self.has_normals else None
            records.append(VertexRecord(position=row["vertex"], uv=row.get("uv", [0.0, 0.0]), normal=normal))
        return records

    def set_records(self, records: Sequence[VertexRecord]) -> None:
        """Write positions (and normals, when the block carries them) back; UVs are kept."""
        rows = self.store.rows(self.block_id, "vertex_data")
        if len(rows) != len(records):
            raise ValueError(f"Block {self.block_id} has {len(rows)} vertices, got {len(records)} records")
        updated = []
        for row, record in zip(rows, records):
            row = {**row, "vertex": record.position.tolist()}
            if self.has_normals and record.normal is not None:
                row["normal"] = record.normal.tolist()
            updated.append(row)
        self.store.set_array(self.block_id, "vertex_data", updated)

    def set_bounding_sphere(self, bounds: Bounds) -> None:
        self.store.set(self.block_id, "bounding_sphere", {
            "center": list(bounds.center),
            "radius": bounds.radius,
        })
