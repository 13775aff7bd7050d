"""Per-dimension numeric/categorical classification."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator

from ..exceptions import DimensionOutOfRangeError


class Datatype(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


def check_dimension(dimension: int) -> int:
    dimension = int(dimension)
    if dimension < 0:
        raise ValueError(f"dimension must be non-negative, got {dimension}")
    return dimension


class TypeRegistry:
    """
    Ordered datatype flags, one per dimension.

    Reads are strict and fail for unknown dimensions. Writes are permissive:
    assigning past the end grows the registry with numeric slots so callers can
    discover dimensionality while they ingest.
    """

    def __init__(self, dimensionality: int = 0) -> None:
        if dimensionality < 0:
            raise ValueError("dimensionality must be non-negative")
        self._types: list[Datatype] = [Datatype.NUMERIC] * int(dimensionality)

    @classmethod
    def from_iterable(cls, types: Iterable[Datatype | str]) -> "TypeRegistry":
        registry = cls()
        registry._types = [Datatype(value) for value in types]
        return registry

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[Datatype]:
        return iter(self._types)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeRegistry):
            return NotImplemented
        return self._types == other._types

    def __repr__(self) -> str:
        return f"TypeRegistry({[datatype.value for datatype in self._types]})"

    def get(self, dimension: int) -> Datatype:
        dimension = check_dimension(dimension)
        if dimension >= len(self._types):
            raise DimensionOutOfRangeError(dimension, len(self._types))
        return self._types[dimension]

    __getitem__ = get

    def ensure(self, dimension: int) -> None:
        """Grow the registry so ``dimension`` is addressable."""
        dimension = check_dimension(dimension)
        if dimension >= len(self._types):
            self._types.extend([Datatype.NUMERIC] * (dimension + 1 - len(self._types)))

    def __setitem__(self, dimension: int, datatype: Datatype | str) -> None:
        self.ensure(dimension)
        self._types[int(dimension)] = Datatype(datatype)

    def is_categorical(self, dimension: int) -> bool:
        """Like :meth:`get` but answers False for unknown dimensions."""
        dimension = check_dimension(dimension)
        return dimension < len(self._types) and self._types[dimension] is Datatype.CATEGORICAL

    def to_list(self) -> list[str]:
        return [datatype.value for datatype in self._types]
