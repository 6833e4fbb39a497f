from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Collection, Dict, Union

from meshtidy.model.attributes import AttributeArraySet
from meshtidy.model.results import Failure, Result, Success

KeepPredicate = Union[Collection[int], Callable[[int], bool]]


@dataclass
class Compaction:
    """Compacted attributes plus the old -> new index mapping that produced them."""
    attributes: AttributeArraySet
    mapping: Dict[int, int]
    original_count: int

    @property
    def removed(self) -> int:
        return self.original_count - len(self.mapping)


def _keeps(keep: KeepPredicate) -> Callable[[int], bool]:
    if callable(keep):
        return keep
    return keep.__contains__


def build_mapping(keep: KeepPredicate, num_vertices: int) -> Dict[int, int]:
    """Assign consecutive new indices to the kept old indices, in ascending order."""
    test = _keeps(keep)
    mapping: Dict[int, int] = {}
    for old in range(num_vertices):
        if test(old):
            mapping[old] = len(mapping)
    return mapping


def compact(attributes: AttributeArraySet, keep: KeepPredicate) -> Result[Compaction]:
    """
    Drop every vertex not selected by `keep` from all co-arrays.

    The length invariant is checked before anything is touched, so a
    SizeMismatch leaves `attributes` as it was. The input set is never mutated;
    the returned set is a new object.
    """
    failure = attributes.validate()
    if failure is not None:
        return failure

    mapping = build_mapping(keep, len(attributes))
    return Success(Compaction(
        attributes=attributes.take(list(mapping)),
        mapping=mapping,
        original_count=len(attributes),
    ))
