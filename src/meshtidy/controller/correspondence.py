"""
Vertex Correspondence by UV
===========================
Transplants vertex positions (and normals) from an externally supplied vertex
list into a target vertex list whose order is unrelated.

Why is this file needed?
------------------------
1. Matching: With no index mapping between the two lists, vertices are paired
   by their UV coordinate, which is assumed to already be correct on the target.
2. Interchange: The external list travels as JSON text through the clipboard,
   one record per vertex.

The matching is greedy: each target vertex takes the first unused candidate
in candidate order whose U and V both lie within the tolerance. It is not a
globally optimal assignment.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Dict, List, Sequence, TYPE_CHECKING

import numpy as np

from meshtidy.config import UV_MATCH_TOLERANCE
from meshtidy.model.attributes import VertexRecord
from meshtidy.model.results import ErrorKind, Failure, Result, Success

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass
class UnmatchedVertex:
    index: int
    position: tuple[float, float, float]


@dataclass
class CorrespondenceReport:
    """Summary of a transplant, for operator review."""
    total: int
    matched: int = 0
    unmatched: List[UnmatchedVertex] = field(default_factory=list)
    # target index -> candidate index
    correspondence: Dict[int, int] = field(default_factory=dict)

    @property
    def unmatched_indices(self) -> List[int]:
        return [vertex.index for vertex in self.unmatched]

    def summary(self) -> str:
        return f"Modified {self.matched} out of {self.total} vertices."


@dataclass
class Transplant:
    records: List[VertexRecord]
    report: CorrespondenceReport


def match_by_uv(
    target: Sequence[VertexRecord],
    candidates: Sequence[VertexRecord],
    tolerance: float = UV_MATCH_TOLERANCE,
) -> Result[Transplant]:
    """
    Match every target vertex to an unused candidate with (nearly) the same UV.

    Args:
        target: Vertices to update, in their own order.
        candidates: External vertices in arbitrary order. Must have exactly as
                    many entries as `target`.
        tolerance: Absolute per-axis UV tolerance (strict).

    Returns:
        Success with new target records (matched positions and normals
        replaced, UVs untouched) and a report, or a SizeMismatch failure when
        the counts differ. The input records are never modified.
    """
    if len(candidates) != len(target):
        return Failure(
            ErrorKind.SIZE_MISMATCH,
            f"The imported array size is not equal to the vertex data size. "
            f"Was: {len(candidates)}, Expected: {len(target)}",
        )

    report = CorrespondenceReport(total=len(target))
    if not target:
        return Success(Transplant(records=[], report=report))

    candidate_uvs: npt.NDArray[np.float64] = np.array([c.uv for c in candidates])
    used = np.zeros(len(candidates), dtype=bool)
    records: List[VertexRecord] = []

    for i, vertex in enumerate(target):
        diff = np.abs(candidate_uvs - vertex.uv)
        hits = np.flatnonzero(~used & (diff[:, 0] < tolerance) & (diff[:, 1] < tolerance))

        if hits.size == 0:
            logger.debug(f"{i:4d} Match not found, vertex not modified")
            report.unmatched.append(UnmatchedVertex(i, tuple(float(x) for x in vertex.position)))
            records.append(VertexRecord(vertex.position.copy(), vertex.uv.copy(),
                                        None if vertex.normal is None else vertex.normal.copy()))
            continue

        j = int(hits[0])
        used[j] = True
        source = candidates[j]
        normal = vertex.normal
        if vertex.normal is not None and source.normal is not None:
            normal = source.normal
        records.append(VertexRecord(source.position.copy(), vertex.uv.copy(),
                                    None if normal is None else normal.copy()))
        report.correspondence[i] = j
        report.matched += 1
        logger.debug(f"{i:4d} Match found ({j:4d} {source.position.tolist()})")

    return Success(Transplant(records=records, report=report))


def encode_vertex_records(records: Sequence[VertexRecord]) -> str:
    """Serialize records as a JSON array, one record per line."""
    lines = []
    for record in records:
        entry: dict = {"vertex": [float(x) for x in record.position]}
        if record.normal is not None:
            entry["normal"] = [float(x) for x in record.normal]
        entry["uv"] = [float(x) for x in record.uv]
        lines.append(json.dumps(entry))
    return "[" + ",\n".join(lines) + "]"


def decode_vertex_records(text: str) -> Result[List[VertexRecord]]:
    """Parse the JSON produced by encode_vertex_records()."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return Failure(ErrorKind.INVALID_PAYLOAD, f"Error reading JSON data: {e}")

    if not isinstance(data, list):
        return Failure(ErrorKind.INVALID_PAYLOAD, "Vertex data must be a JSON array")

    records: List[VertexRecord] = []
    for i, entry in enumerate(data):
        try:
            normal = entry.get("normal")
            records.append(VertexRecord(
                position=entry["vertex"],
                uv=entry["uv"],
                normal=normal if isinstance(normal, list) else None,
            ))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            return Failure(ErrorKind.INVALID_PAYLOAD, f"Record {i} is malformed: {e!r}")
    return Success(records)
