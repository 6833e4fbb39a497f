"""
Input/Output Manager (HDF5)
Handles saving and loading MeshStore snapshots to .h5 files.

Regular numeric fields (vertices, triangles, UV sets) become compressed
datasets, everything else (scalars, ragged strips, weight tables) is stored as
JSON, in an attribute when small and in a dataset when it exceeds the HDF5
attribute size limit.
"""
import json
import logging
from typing import Any

import h5py
import numpy as np

from meshtidy import __version__ as APP_VERSION
from meshtidy.model.store import MeshStore

logger = logging.getLogger(__name__)

# HDF5 attributes are limited to 64KB
ATTRIBUTE_LIMIT = 60000
JSON_DATASET_PREFIX = "json:"


def _numeric_array(value: Any) -> np.ndarray | None:
    """Return `value` as a numeric array when it is a regular nested list, else None."""
    if not isinstance(value, list) or not value:
        return None
    try:
        array = np.asarray(value)
    except ValueError:
        # ragged
        return None
    if array.dtype.kind not in "iufb":
        return None
    return array


class IOManager:
    @staticmethod
    def save_store(store: MeshStore, filepath: str) -> None:
        logger.info(f"Saving store to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                f.attrs["header"] = json.dumps({
                    "version": store.version,
                    "user_version": store.user_version,
                    "user_version_2": store.user_version_2,
                })

                grp_blocks = f.create_group("blocks")
                for block_id, block in store.blocks():
                    grp = grp_blocks.create_group(str(block_id))
                    grp.attrs["type"] = block.block_type
                    grp.attrs["links"] = json.dumps(block.links)

                    grp_fields = grp.create_group("fields")
                    for name, value in block.fields.items():
                        array = _numeric_array(value)
                        if array is not None:
                            grp_fields.create_dataset(name, data=array, compression="gzip")
                            continue

                        text = json.dumps(value)
                        if len(text) > ATTRIBUTE_LIMIT:
                            logger.debug(f"Field '{name}' of block {block_id} is large, using dataset")
                            grp_fields.create_dataset(
                                JSON_DATASET_PREFIX + name, data=np.void(text.encode('utf-8'))
                            )
                        else:
                            grp_fields.attrs[name] = text

            logger.info(f"Store saved to: {filepath} ({len(store)} blocks)")

        except Exception as e:
            logger.exception(f"Failed to save store: {e}")
            raise e

    @staticmethod
    def load_store(filepath: str) -> MeshStore:
        logger.info(f"Loading store from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        try:
            with h5py.File(filepath, "r") as f:
                header = json.loads(f.attrs["header"]) if "header" in f.attrs else {}
                store = MeshStore(
                    version=int(header.get("version", 0)),
                    user_version=int(header.get("user_version", 0)),
                    user_version_2=int(header.get("user_version_2", 0)),
                )

                grp_blocks = f.get("blocks")
                if grp_blocks is None:
                    return store

                for key in sorted(grp_blocks.keys(), key=int):
                    grp = grp_blocks[key]
                    fields: dict[str, Any] = {}
                    grp_fields = grp["fields"]
                    for name, text in grp_fields.attrs.items():
                        fields[name] = json.loads(text)
                    for name, dataset in grp_fields.items():
                        if name.startswith(JSON_DATASET_PREFIX):
                            raw = bytes(dataset[()]).decode('utf-8')
                            fields[name[len(JSON_DATASET_PREFIX):]] = json.loads(raw)
                        else:
                            fields[name] = dataset[()].tolist()

                    links = {
                        name: (int(target) if target is not None else None)
                        for name, target in json.loads(grp.attrs["links"]).items()
                    }
                    store.add_block(str(grp.attrs["type"]), fields=fields, links=links, block_id=int(key))

            logger.info(f"Loaded {len(store)} blocks from: {filepath}")
            return store

        except Exception as e:
            logger.exception(f"Failed to load store: {e}")
            raise e
