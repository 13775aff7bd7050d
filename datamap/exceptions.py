"""Error types raised by the dataset mapper."""

from __future__ import annotations


class DatamapError(Exception):
    """Base class for every error raised by :mod:`datamap`."""


class DimensionOutOfRangeError(DatamapError, IndexError):
    """A read-only lookup referenced a dimension the mapper does not know."""

    def __init__(self, dimension: int, dimensionality: int) -> None:
        super().__init__(
            f"requested type of dimension {dimension}, but dataset only has "
            f"{dimensionality} dimensions"
        )
        self.dimension = dimension
        self.dimensionality = dimensionality


class UnknownMappingError(DatamapError, KeyError):
    """A token or code was never assigned in the requested dimension."""

    def __str__(self) -> str:
        # KeyError wraps its message in quotes; keep the plain text instead.
        return str(self.args[0]) if self.args else ""


class InvalidMapperStateError(DatamapError, ValueError):
    """Serialized mapper state violates the mapping invariants."""
