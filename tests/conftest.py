import logging

import pytest

from meshtidy.model.store import MeshStore


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the command line so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("meshtidy")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def build_skinned_shape(
    vertices,
    triangles=(),
    strips=None,
    normals=None,
    colors=None,
    uv_sets=None,
    bones=None,
    partition_on="instance",
    shape_type="TriShape",
    data_type="TriShapeData",
):
    """
    Build a store holding one shape, its data and (optionally) skin blocks.

    Returns (store, ids) where ids maps "shape", "data", "skin_instance",
    "skin_data" and "partition" to block ids (None when absent).
    """
    store = MeshStore()
    fields = {
        "num_vertices": len(vertices),
        "vertices": [list(v) for v in vertices],
        "normals": [list(n) for n in (normals or [])],
        "vertex_colors": [list(c) for c in (colors or [])],
        "uv_sets": [[list(uv) for uv in uv_set] for uv_set in (uv_sets or [])],
    }
    if data_type == "TriStripsData":
        fields["num_triangles"] = sum(max(len(s) - 2, 0) for s in (strips or []))
    if data_type != "TriStripsData" or triangles:
        fields["num_triangles"] = len(triangles)
        fields["triangles"] = [list(t) for t in triangles]
    if data_type == "TriStripsData" or strips is not None:
        fields["points"] = [list(s) for s in (strips or [])]
    data = store.add_block(data_type, fields=fields)
    ids = {"data": data, "skin_instance": None, "skin_data": None, "partition": None}

    links = {"data": data}
    if bones is not None:
        partition = None
        if partition_on is not None:
            partition = store.add_block("SkinPartition", fields={"vertex_flags": 0, "vertex_data": []})
        skin_data = store.add_block("SkinData", fields={
            "bone_list": [
                {"num_vertices": len(b), "vertex_weights": [{"index": i, "weight": w} for i, w in b]}
                for b in bones
            ],
        }, links={"skin_partition": partition if partition_on == "data" else None})
        skin_instance = store.add_block("SkinInstance", links={
            "data": skin_data,
            "skin_partition": partition if partition_on == "instance" else None,
        })
        links["skin_instance"] = skin_instance
        ids.update(skin_instance=skin_instance, skin_data=skin_data, partition=partition)

    ids["shape"] = store.add_block(shape_type, links=links)
    return store, ids


def build_partition_store(records, has_normals=False):
    """A store with a single skin partition carrying packed vertex records."""
    store = MeshStore()
    rows = []
    for position, uv, normal in records:
        row = {"vertex": list(position), "uv": list(uv)}
        if normal is not None:
            row["normal"] = list(normal)
        rows.append(row)
    block = store.add_block("SkinPartition", fields={
        "vertex_flags": 0x80 if has_normals else 0,
        "vertex_data": rows,
    })
    return store, block


@pytest.fixture
def square_records():
    """Four vertices of a unit square, UVs equal to their XY."""
    return [
        ((0.0, 0.0, 0.0), (0.0, 0.0), None),
        ((1.0, 0.0, 0.0), (1.0, 0.0), None),
        ((0.0, 1.0, 0.0), (0.0, 1.0), None),
        ((1.0, 1.0, 0.0), (1.0, 1.0), None),
    ]
