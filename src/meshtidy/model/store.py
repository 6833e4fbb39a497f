"""
Block Store (Host Model)
========================
An in-memory model of the block graph a mesh lives in.

Why is this file needed?
------------------------
1. Host capabilities: The algorithms need somewhere to read fields from, write
   them back to, follow links and delete derived blocks. This store provides
   exactly those capabilities and nothing more.
2. Persistence: It converts to and from plain dictionaries so the command line
   can keep stores in JSON documents (see model/io.py for HDF5 snapshots).

Blocks have stable integer ids. Fields are plain Python values (lists,
numbers, dicts) so that a store is always JSON serializable; typed access is
the job of host/shape.py.

Classes:
    Block: One typed block with named fields and named links.
    MeshStore: The container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import copy
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Block type -> parent type
BLOCK_HIERARCHY: Dict[str, Optional[str]] = {
    "GeometryData": None,
    "TriBasedGeomData": "GeometryData",
    "TriShapeData": "TriBasedGeomData",
    "TriStripsData": "TriBasedGeomData",
    "Geometry": None,
    "TriBasedGeom": "Geometry",
    "TriShape": "TriBasedGeom",
    "LODTriShape": "TriShape",
    "TriStrips": "TriBasedGeom",
    "PackedTriShape": None,
    "SkinInstance": None,
    "DismemberSkinInstance": "SkinInstance",
    "SkinData": None,
    "SkinPartition": None,
}


def _plain(value: Any) -> Any:
    """Convert numpy values (and containers of them) into plain Python values."""
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass
class Block:
    block_type: str
    fields: Dict[str, Any] = field(default_factory=dict)
    links: Dict[str, Optional[int]] = field(default_factory=dict)


class MeshStore:
    def __init__(self, version: int = 0, user_version: int = 0, user_version_2: int = 0) -> None:
        self.version = version
        self.user_version = user_version
        self.user_version_2 = user_version_2
        self._blocks: Dict[int, Block] = {}
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def add_block(
        self,
        block_type: str,
        fields: Optional[Dict[str, Any]] = None,
        links: Optional[Dict[str, Optional[int]]] = None,
        block_id: Optional[int] = None,
    ) -> int:
        """Add a block and return its id."""
        if block_type not in BLOCK_HIERARCHY:
            raise ValueError(f"Unknown block type '{block_type}'")
        if block_id is None:
            block_id = self._next_id
        elif block_id in self._blocks:
            raise ValueError(f"Block id {block_id} is already in use")
        self._blocks[block_id] = Block(block_type, _plain(fields or {}), dict(links or {}))
        self._next_id = max(self._next_id, block_id + 1)
        return block_id

    def block(self, block_id: int) -> Block:
        if block_id not in self._blocks:
            raise KeyError(f"No block with id {block_id}")
        return self._blocks[block_id]

    def blocks(self) -> Iterator[Tuple[int, Block]]:
        """Enumerate (id, block) pairs in id order."""
        for block_id in sorted(self._blocks):
            yield block_id, self._blocks[block_id]

    def remove_block(self, block_id: int) -> None:
        """Delete a block and clear every link that pointed to it."""
        removed = self.block(block_id)
        del self._blocks[block_id]
        for other in self._blocks.values():
            for name, target in other.links.items():
                if target == block_id:
                    other.links[name] = None
        logger.debug(f"Removed block {block_id} ({removed.block_type})")

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------
    def inherits(self, block_id: Optional[int], *type_names: str) -> bool:
        """True when the block's type is, or derives from, one of the given types."""
        if block_id is None or block_id not in self._blocks:
            return False
        current: Optional[str] = self._blocks[block_id].block_type
        while current is not None:
            if current in type_names:
                return True
            current = BLOCK_HIERARCHY.get(current)
        return False

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------
    def get(self, block_id: int, name: str, default: Any = None) -> Any:
        return self.block(block_id).fields.get(name, default)

    def set(self, block_id: int, name: str, value: Any) -> None:
        self.block(block_id).fields[name] = _plain(value)

    def rows(self, block_id: int, name: str) -> List[Any]:
        """Child rows of an array field (empty when the field is absent)."""
        return list(self.block(block_id).fields.get(name) or [])

    def resize(self, block_id: int, name: str, length: int, fill: Any = None) -> None:
        """Resize a dynamic array field, truncating or padding with `fill`."""
        fields = self.block(block_id).fields
        current = list(fields.get(name) or [])
        if length < len(current):
            current = current[:length]
        else:
            current.extend(copy.deepcopy(fill) for _ in range(length - len(current)))
        fields[name] = current

    def set_array(self, block_id: int, name: str, values: Any) -> None:
        """
        Bulk-write an array field.

        The field must already have the length of `values`; call resize() first
        when the length changes.
        """
        values = _plain(values)
        current = self.block(block_id).fields.get(name) or []
        if len(current) != len(values):
            raise ValueError(
                f"Array '{name}' of block {block_id} has {len(current)} rows, "
                f"cannot write {len(values)} (resize first)"
            )
        self.block(block_id).fields[name] = list(values)

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------
    def link(self, block_id: Optional[int], name: str, *type_names: str) -> Optional[int]:
        """
        Resolve a link field.

        Returns None when the block or link is missing, or when `type_names` are
        given and the target is not one of them.
        """
        if block_id is None or block_id not in self._blocks:
            return None
        target = self._blocks[block_id].links.get(name)
        if target is None or target not in self._blocks:
            return None
        if type_names and not self.inherits(target, *type_names):
            return None
        return target

    def parents(self, block_id: int, link_name: Optional[str] = None) -> List[int]:
        """Ids of the blocks linking to `block_id` (through `link_name`, if given)."""
        result = []
        for other_id, other in self.blocks():
            for name, target in other.links.items():
                if target == block_id and (link_name is None or name == link_name):
                    result.append(other_id)
                    break
        return result

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": {
                "version": self.version,
                "user_version": self.user_version,
                "user_version_2": self.user_version_2,
            },
            "blocks": [
                {
                    "id": block_id,
                    "type": block.block_type,
                    "fields": _plain(block.fields),
                    "links": dict(block.links),
                }
                for block_id, block in self.blocks()
            ],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> MeshStore:
        header = data.get("header", {})
        store = MeshStore(
            version=int(header.get("version", 0)),
            user_version=int(header.get("user_version", 0)),
            user_version_2=int(header.get("user_version_2", 0)),
        )
        for entry in data.get("blocks", []):
            store.add_block(
                entry["type"],
                fields=entry.get("fields", {}),
                links=entry.get("links", {}),
                block_id=int(entry["id"]),
            )
        logger.debug(f"Loaded store with {len(store)} blocks.")
        return store
