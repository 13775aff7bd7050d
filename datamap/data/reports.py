"""Post-ingestion diagnostics over a mapper and its numeric matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from loguru import logger

from .mapper import DatasetMapper


@dataclass(frozen=True)
class RangeViolation:
    """A cell whose value falls outside the accepted range."""

    row: int
    dimension: int
    value: float
    bound: str  # "minimum" or "maximum"


def ledger_frame(mapper: DatasetMapper) -> pd.DataFrame:
    """Return every invalid cell as a frame with ``token, dimension, row`` columns."""
    records = [
        {"token": entry.token, "dimension": entry.dimension, "row": entry.row}
        for entry in mapper.ledger.entries()
    ]
    frame = pd.DataFrame(records, columns=["token", "dimension", "row"])
    return frame.astype({"dimension": "int64", "row": "int64"})


def mapping_summary(mapper: DatasetMapper) -> pd.DataFrame:
    """Per-dimension datatype, number of mappings and number of invalid cells."""
    rows = []
    for dimension in range(mapper.dimensionality):
        mappings = mapper.count_mappings(dimension)
        if mappings > 0:
            logger.info("{} mappings in dimension {}.", mappings, dimension)
        rows.append(
            {
                "dimension": dimension,
                "datatype": mapper.type(dimension).value,
                "mappings": mappings,
                "invalid": mapper.count_invalid(dimension),
            }
        )
    return pd.DataFrame(rows, columns=["dimension", "datatype", "mappings", "invalid"])


def check_range(
    matrix: np.ndarray,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    dimension: Optional[int] = None,
) -> list[RangeViolation]:
    """
    Flag cells smaller than ``minimum`` or larger than ``maximum``.

    Only ``dimension`` is inspected when given, otherwise every dimension is.
    NaN cells are invalid values already tracked by the ledger and are skipped.
    """
    if minimum is None and maximum is None:
        raise ValueError("check_range needs a minimum, a maximum, or both.")
    values = np.asarray(matrix, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError(f"Expected a 2-D matrix, got shape {values.shape}")

    if dimension is None:
        dimensions = range(values.shape[1])
    else:
        if not 0 <= dimension < values.shape[1]:
            raise ValueError(
                f"dimension {dimension} out of range for matrix with {values.shape[1]} dimensions"
            )
        dimensions = [dimension]

    violations: list[RangeViolation] = []
    for dim in dimensions:
        column = values[:, dim]
        # NaN compares False on both sides, so invalid cells never match.
        flagged: list[tuple[int, str]] = []
        if minimum is not None:
            flagged.extend((int(row), "minimum") for row in np.flatnonzero(column < minimum))
        if maximum is not None:
            flagged.extend((int(row), "maximum") for row in np.flatnonzero(column > maximum))
        for row, bound in sorted(flagged):
            value = float(column[row])
            if bound == "minimum":
                logger.warning("Smaller than minimum at ({}, {}): {}", row, dim, value)
            else:
                logger.warning("Larger than maximum at ({}, {}): {}", row, dim, value)
            violations.append(RangeViolation(row, dim, value, bound))
    return violations
