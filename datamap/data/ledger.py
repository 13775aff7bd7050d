"""Diagnostic store of invalid tokens and where they occurred."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator

from loguru import logger

from ..exceptions import UnknownMappingError

INVALID_SENTINEL = math.nan


@dataclass(frozen=True, order=True)
class InvalidEntry:
    """One occurrence of an invalid token."""

    dimension: int
    row: int
    token: str


@dataclass
class _DimensionLedger:
    coordinates: dict[str, set[tuple[int, int]]] = field(default_factory=dict)
    count: int = 0


class InvalidValueLedger:
    """
    Multi-map from invalid token to the ``(dimension, row)`` cells holding it.

    Recording never fails and never touches the mapping tables; the ledger is
    only there so callers can find out where bad data sat after ingestion.
    """

    def __init__(self) -> None:
        self._dimensions: dict[int, _DimensionLedger] = {}

    def __len__(self) -> int:
        return sum(entry.count for entry in self._dimensions.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        token, dimension = key
        ledger = self._dimensions.get(dimension)
        return ledger is not None and token in ledger.coordinates

    def record(self, token: str, dimension: int, row: int) -> float:
        ledger = self._dimensions.get(dimension)
        if ledger is None:
            ledger = self._dimensions[dimension] = _DimensionLedger()
        ledger.coordinates.setdefault(token, set()).add((dimension, row))
        ledger.count += 1
        logger.debug("Recorded invalid token {!r} at ({}, {})", token, dimension, row)
        return INVALID_SENTINEL

    def count(self, dimension: int) -> int:
        ledger = self._dimensions.get(dimension)
        return 0 if ledger is None else ledger.count

    def dimensions(self) -> list[int]:
        return sorted(self._dimensions)

    def tokens(self, dimension: int) -> list[str]:
        ledger = self._dimensions.get(dimension)
        return [] if ledger is None else list(ledger.coordinates)

    def coordinates(self, token: str, dimension: int) -> frozenset[tuple[int, int]]:
        ledger = self._dimensions.get(dimension)
        if ledger is None or token not in ledger.coordinates:
            raise UnknownMappingError(
                f"invalid value '{token}' unknown for dimension {dimension}"
            )
        return frozenset(ledger.coordinates[token])

    def entries(self) -> Iterator[InvalidEntry]:
        """Yield every recorded cell ordered by dimension, then row."""
        collected = [
            InvalidEntry(dimension=dim, row=row, token=token)
            for ledger in self._dimensions.values()
            for token, cells in ledger.coordinates.items()
            for dim, row in cells
        ]
        yield from sorted(collected)
