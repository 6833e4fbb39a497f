from __future__ import annotations

import logging
from typing import Dict, Tuple

from meshtidy.model.attributes import AttributeArraySet
from meshtidy.model.results import ErrorKind, Failure, Result, Success

logger = logging.getLogger(__name__)


def _vertex_key(attributes: AttributeArraySet, index: int) -> Tuple[Tuple[float, ...], ...]:
    parts = [tuple(attributes.positions[index].tolist())]
    if attributes.has_normals:
        parts.append(tuple(attributes.normals[index].tolist()))
    if attributes.has_colors:
        parts.append(tuple(attributes.colors[index].tolist()))
    parts.extend(tuple(uv[index].tolist()) for uv in attributes.uv_sets)
    return tuple(parts)


def find_duplicates(attributes: AttributeArraySet) -> Result[Dict[int, int]]:
    """
    Map every duplicate vertex to its canonical representative.

    Two vertices a < b are duplicates when position, normal (if present),
    color (if present) and every UV set compare exactly equal. The canonical
    vertex is always the lowest index of its group, so the result maps higher
    indices to lower ones and never contains a canonical index as a key.

    Grouping by exact attribute tuples gives the same groups as comparing every
    pair: float equality is transitive apart from NaN, and NaN never matches
    under either approach.
    """
    if attributes.is_empty:
        return Failure(ErrorKind.EMPTY_INPUT, "No vertices")
    failure = attributes.validate()
    if failure is not None:
        return failure

    canonical: Dict[Tuple[Tuple[float, ...], ...], int] = {}
    duplicates: Dict[int, int] = {}
    for index in range(len(attributes)):
        key = _vertex_key(attributes, index)
        first = canonical.setdefault(key, index)
        if first != index:
            duplicates[index] = first

    logger.debug(f"Detected {len(duplicates)} duplicate vertices")
    return Success(duplicates)
