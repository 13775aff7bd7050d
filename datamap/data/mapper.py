"""
Dataset mapper: per-dimension types, categorical codes and invalid values.

A :class:`DatasetMapper` is built once per load. The loader hands it the tokens
of one dimension at a time and receives the numeric values to store; afterwards
the mapper answers lookups in both directions and can be persisted.
"""

from __future__ import annotations

from typing import Iterable, MutableSequence, Sequence

import numpy as np
from loguru import logger

from .datatype import Datatype, TypeRegistry, check_dimension
from .ledger import InvalidValueLedger
from .policies import AssigningPolicy, MappingPolicy
from .tables import MappingTable
from .tokens import count_non_numeric, parse_numeric


class DatasetMapper:
    """
    Holds the type of every dimension and the token/code tables of the
    categorical ones.

    Parameters
    ----------
    dimensionality:
        Number of dimensions known up front. Writing the type of a larger
        dimension grows it later.
    policy:
        Mapping policy used by :meth:`resolve` and :meth:`map_tokens`
        (default: :class:`AssigningPolicy`).
    missing_values:
        Tokens that are always recorded as invalid during batch ingestion.
    """

    def __init__(
        self,
        dimensionality: int = 0,
        policy: MappingPolicy | None = None,
        missing_values: Iterable[str] = (),
    ) -> None:
        self.types = TypeRegistry(dimensionality)
        self.table = MappingTable(self.types)
        self.ledger = InvalidValueLedger()
        self.missing_values: frozenset[str] = frozenset(str(v) for v in missing_values)
        self._policy: MappingPolicy = AssigningPolicy()
        if policy is not None:
            self.policy = policy

    def __repr__(self) -> str:
        return (
            f"DatasetMapper(dimensionality={self.dimensionality}, "
            f"policy={self._policy!r}, missing_values={sorted(self.missing_values)!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatasetMapper):
            return NotImplemented
        return self.types == other.types and self.table == other.table

    @property
    def policy(self) -> MappingPolicy:
        return self._policy

    @policy.setter
    def policy(self, policy: MappingPolicy) -> None:
        if not isinstance(policy, MappingPolicy):
            raise TypeError(f"{policy!r} does not implement resolve()")
        self._policy = policy

    @property
    def dimensionality(self) -> int:
        return len(self.types)

    def type(self, dimension: int) -> Datatype:
        return self.types.get(dimension)

    def set_type(self, dimension: int, datatype: Datatype | str) -> None:
        """Overwrite the type of ``dimension``, growing the registry if needed."""
        self.types[dimension] = datatype

    def count_mappings(self, dimension: int) -> int:
        return self.table.count_mappings(dimension)

    def count_invalid(self, dimension: int) -> int:
        return self.ledger.count(dimension)

    def map_token(self, token: str, dimension: int) -> int:
        """Return the code of ``token`` in ``dimension``, assigning one if new."""
        return self.table.assign(str(token), check_dimension(dimension))

    def resolve(
        self,
        token: str,
        dimension: int,
        row: int,
        *,
        force_invalid: bool = False,
        anomalous: bool = False,
    ) -> float:
        """Route ``token`` through the active policy and return its value."""
        return self._policy.resolve(
            self,
            str(token),
            check_dimension(dimension),
            int(row),
            force_invalid=force_invalid,
            anomalous=anomalous,
        )

    def record_invalid(self, token: str, dimension: int, row: int) -> float:
        return self.ledger.record(str(token), check_dimension(dimension), int(row))

    def unmap_token(self, code: int, dimension: int) -> str:
        return self.table.unmap_token(code, dimension)

    def unmap_value(self, token: str, dimension: int) -> int:
        return self.table.unmap_value(token, dimension)

    def unmap_invalid(self, token: str, dimension: int) -> frozenset[tuple[int, int]]:
        """Return the ``(dimension, row)`` cells where ``token`` was invalid."""
        return self.ledger.coordinates(token, dimension)

    def map_tokens(self, tokens: Sequence[str], dimension: int) -> np.ndarray:
        """
        Convert every token of one dimension into its numeric value.

        Returns a float64 vector aligned with ``tokens``.
        """
        values = np.empty(len(tokens), dtype=np.float64)
        self.map_tokens_into(tokens, dimension, values)
        return values

    def map_tokens_into(
        self,
        tokens: Sequence[str],
        dimension: int,
        out: MutableSequence[float],
    ) -> None:
        """
        Like :meth:`map_tokens` but writes into a caller-owned slot.

        The batch is classified by majority vote every time this is called:
        when strictly more than half of the tokens are not numbers, every token
        goes through the policy and numeric ones are flagged as anomalous.
        Otherwise numbers are written as parsed and only the rest reaches the
        policy.
        """
        dimension = check_dimension(dimension)
        if len(out) != len(tokens):
            raise ValueError(
                f"Output slot holds {len(out)} values but {len(tokens)} tokens were given."
            )
        self.types.ensure(dimension)

        tokens = [str(token) for token in tokens]
        non_numeric = count_non_numeric(tokens)
        categorical = non_numeric > len(tokens) / 2
        logger.debug(
            "Dimension {}: {}/{} non-numeric tokens, treated as {}",
            dimension,
            non_numeric,
            len(tokens),
            "categorical" if categorical else "numeric",
        )

        for row, token in enumerate(tokens):
            numeric = parse_numeric(token)
            missing = token in self.missing_values
            if categorical:
                value = self._resolve_logged(
                    token,
                    dimension,
                    row,
                    force_invalid=missing,
                    anomalous=numeric is not None,
                )
            elif missing or numeric is None:
                value = self._resolve_logged(
                    token,
                    dimension,
                    row,
                    force_invalid=missing,
                    anomalous=numeric is None,
                )
            else:
                value = numeric
            out[row] = value

    def _resolve_logged(
        self,
        token: str,
        dimension: int,
        row: int,
        *,
        force_invalid: bool,
        anomalous: bool,
    ) -> float:
        before = self.ledger.count(dimension)
        value = self._policy.resolve(
            self, token, dimension, row, force_invalid=force_invalid, anomalous=anomalous
        )
        if self.ledger.count(dimension) != before:
            logger.warning(
                "Invalid value at row {}, dimension {}: {!r}", row, dimension, token
            )
        return value
