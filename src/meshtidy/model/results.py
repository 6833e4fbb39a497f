"""
Tagged Operation Results
========================
Every fallible mesh operation returns either a Success carrying its value or
a Failure naming one of the ErrorKind values. Callers branch on the tag with
`match` instead of unwinding an exception.

Classes:
    ErrorKind: Named validation failures reported to the operator.
    Success: Wrapper for a successful value.
    Failure: Error kind plus a human readable message.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(StrEnum):
    EMPTY_INPUT = "EmptyInput"
    SIZE_MISMATCH = "SizeMismatch"
    INVALID_INDEX = "InvalidIndex"
    INVALID_PAYLOAD = "InvalidPayload"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


Result = Union[Success[T], Failure]
