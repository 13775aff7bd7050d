"""
Dataset mapping toolkit.

Infers whether each column of a tokenised dataset is numeric or categorical,
encodes categorical tokens as dense per-column codes and keeps a ledger of the
cells that held invalid values.
"""

from .data import DatasetMapper, Datatype  # noqa: F401
from .exceptions import (  # noqa: F401
    DatamapError,
    DimensionOutOfRangeError,
    InvalidMapperStateError,
    UnknownMappingError,
)
