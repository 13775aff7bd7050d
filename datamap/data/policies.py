"""
Mapping policies deciding where each token ends up.

A policy receives the mapper it serves and either assigns the token a code in
the mapping table or records it in the invalid-value ledger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from loguru import logger

from .tokens import parse_numeric

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .mapper import DatasetMapper


@runtime_checkable
class MappingPolicy(Protocol):
    """Capability shared by every mapping policy."""

    name: str

    def resolve(
        self,
        mapper: "DatasetMapper",
        token: str,
        dimension: int,
        row: int,
        *,
        force_invalid: bool = False,
        anomalous: bool = False,
    ) -> float:
        """
        Return the numeric value to store for ``token``.

        ``force_invalid`` routes the token to the ledger unconditionally.
        ``anomalous`` marks a token that contradicts the majority type of the
        batch it was read from.
        """
        ...


class AssigningPolicy:
    """Plain categorical encoding: every token handed over gets a code."""

    name = "assigning"

    def __repr__(self) -> str:
        return "AssigningPolicy()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AssigningPolicy)

    def resolve(
        self,
        mapper: "DatasetMapper",
        token: str,
        dimension: int,
        row: int,
        *,
        force_invalid: bool = False,
        anomalous: bool = False,
    ) -> float:
        if force_invalid:
            return mapper.record_invalid(token, dimension, row)
        return float(mapper.table.assign(token, dimension))


class ValidatingPolicy:
    """
    Encoding with missing-value and type-consistency checks.

    Missing markers, numeric noise inside categorical dimensions and text inside
    numeric dimensions are all sent to the ledger so they never take a code.
    """

    name = "validating"

    def __repr__(self) -> str:
        return "ValidatingPolicy()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ValidatingPolicy)

    def resolve(
        self,
        mapper: "DatasetMapper",
        token: str,
        dimension: int,
        row: int,
        *,
        force_invalid: bool = False,
        anomalous: bool = False,
    ) -> float:
        if force_invalid or token in mapper.missing_values:
            logger.debug("Missing value {!r} in dimension {}", token, dimension)
            return mapper.record_invalid(token, dimension, row)

        numeric = parse_numeric(token)
        if numeric is not None:
            if anomalous or mapper.types.is_categorical(dimension):
                logger.debug(
                    "Numeric value {!r} in categorical dimension {}", token, dimension
                )
                return mapper.record_invalid(token, dimension, row)
            return numeric

        if anomalous:
            logger.debug(
                "Categorical value {!r} in numeric dimension {}", token, dimension
            )
            return mapper.record_invalid(token, dimension, row)
        return float(mapper.table.assign(token, dimension))


POLICIES: dict[str, type] = {
    AssigningPolicy.name: AssigningPolicy,
    ValidatingPolicy.name: ValidatingPolicy,
}


def make_policy(name: str) -> MappingPolicy:
    """Instantiate a policy by its registered name."""
    key = str(name).strip().lower()
    if key not in POLICIES:
        raise ValueError(
            f"Unknown mapping policy '{name}'. Expected one of {sorted(POLICIES)}."
        )
    return POLICIES[key]()
