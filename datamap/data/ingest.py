"""
Feed an already tokenised dataset through a :class:`DatasetMapper`.

Tokenising files is the loader's job; these helpers take the resulting columns
(plain sequences or a pandas frame of strings) and build the numeric matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from .datatype import Datatype
from .mapper import DatasetMapper
from .policies import MappingPolicy

Columns = Union[pd.DataFrame, Sequence[Sequence[str]]]


@dataclass(frozen=True)
class MappedDataset:
    """Numeric matrix (rows x dimensions) and the mapper that produced it."""

    matrix: np.ndarray
    mapper: DatasetMapper

    @property
    def num_rows(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def num_dimensions(self) -> int:
        return int(self.matrix.shape[1])


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and np.isnan(value):
        return ""
    if value is pd.NA or value is pd.NaT:
        return ""
    return str(value)


def _frame_columns(frame: pd.DataFrame) -> list[list[str]]:
    return [[_stringify(value) for value in frame.iloc[:, idx].tolist()] for idx in range(frame.shape[1])]


def map_dataset(
    columns: Columns,
    mapper: DatasetMapper | None = None,
    *,
    policy: MappingPolicy | None = None,
    missing_values: Iterable[str] = (),
) -> MappedDataset:
    """
    Map every column of a tokenised dataset, dimension by dimension.

    Parameters
    ----------
    columns:
        Either a DataFrame (one dimension per column) or a sequence of token
        sequences, one per dimension. All columns must have the same length.
    mapper:
        Mapper to fill. A fresh one is built from ``policy`` and
        ``missing_values`` when omitted.
    """
    if mapper is None:
        mapper = DatasetMapper(policy=policy, missing_values=missing_values)
    elif policy is not None or missing_values:
        raise ValueError("Pass either a mapper or policy/missing_values, not both.")

    if isinstance(columns, pd.DataFrame):
        token_columns = _frame_columns(columns)
    else:
        token_columns = [[_stringify(token) for token in column] for column in columns]

    lengths = {len(column) for column in token_columns}
    if len(lengths) > 1:
        raise ValueError(f"Columns have differing lengths: {sorted(lengths)}")
    num_rows = lengths.pop() if lengths else 0

    matrix = np.empty((num_rows, len(token_columns)), dtype=np.float64)
    for dimension, tokens in enumerate(token_columns):
        mapper.map_tokens_into(tokens, dimension, matrix[:, dimension])

    categorical = sum(1 for datatype in mapper.types if datatype is Datatype.CATEGORICAL)
    logger.info(
        "Mapped {} rows across {} dimensions | categorical={} invalid_cells={}",
        num_rows,
        len(token_columns),
        categorical,
        len(mapper.ledger),
    )
    return MappedDataset(matrix=matrix, mapper=mapper)
