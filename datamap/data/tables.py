"""
Bidirectional token/code tables.

Each dimension owns one :class:`TokenTable` that maps raw tokens to contiguous
integer codes in order of first appearance. :class:`MappingTable` groups the
per-dimension tables and keeps the type registry in step with them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from loguru import logger

from ..exceptions import InvalidMapperStateError, UnknownMappingError
from .datatype import Datatype, TypeRegistry


class TokenTable:
    """Bijective mapping between tokens and contiguous codes."""

    __slots__ = ("_token_to_code", "_code_to_token")

    def __init__(self) -> None:
        self._token_to_code: dict[str, int] = {}
        self._code_to_token: list[str] = []

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> "TokenTable":
        """
        Rebuild a table from a ``token -> code`` mapping.

        Codes must cover ``0..n-1`` exactly once; anything else is rejected.
        """
        ordered = sorted(mapping.items(), key=lambda item: item[1])
        codes = [code for _, code in ordered]
        if codes != list(range(len(codes))):
            raise InvalidMapperStateError(
                f"codes {codes} are not contiguous from zero"
            )
        table = cls()
        for token, _ in ordered:
            table.add(str(token))
        return table

    def __len__(self) -> int:
        return len(self._code_to_token)

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_code

    def __iter__(self) -> Iterator[str]:
        return iter(self._code_to_token)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenTable):
            return NotImplemented
        return self._code_to_token == other._code_to_token

    def __repr__(self) -> str:
        return f"TokenTable({self._code_to_token!r})"

    def add(self, token: str) -> int:
        """Return the code for ``token``, inserting it with the next code if new."""
        code = self._token_to_code.get(token)
        if code is None:
            code = len(self._code_to_token)
            self._token_to_code[token] = code
            self._code_to_token.append(token)
        return code

    def code(self, token: str) -> int | None:
        return self._token_to_code.get(token)

    def token(self, code: int) -> str | None:
        if 0 <= code < len(self._code_to_token):
            return self._code_to_token[code]
        return None

    def tokens(self) -> list[str]:
        """Tokens in code order."""
        return list(self._code_to_token)

    def items(self) -> list[tuple[str, int]]:
        return [(token, code) for code, token in enumerate(self._code_to_token)]


def _is_integral(code: object) -> bool:
    try:
        return float(code) == int(code)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return False


class MappingTable:
    """
    Per-dimension token tables plus the registry they classify.

    Tables only exist for dimensions that had at least one token assigned.
    """

    def __init__(self, types: TypeRegistry) -> None:
        self._types = types
        self._tables: dict[int, TokenTable] = {}

    def __contains__(self, dimension: object) -> bool:
        return dimension in self._tables

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._tables))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingTable):
            return NotImplemented
        return self._tables == other._tables

    def table(self, dimension: int) -> TokenTable | None:
        return self._tables.get(dimension)

    def items(self) -> Iterable[tuple[int, TokenTable]]:
        return sorted(self._tables.items())

    def is_mapped(self, token: str, dimension: int) -> bool:
        table = self._tables.get(dimension)
        return table is not None and token in table

    def assign(self, token: str, dimension: int) -> int:
        table = self._tables.get(dimension)
        if table is None:
            table = self._tables[dimension] = TokenTable()
        existing = table.code(token)
        if existing is not None:
            return existing

        first = len(table) == 0
        code = table.add(token)
        if first:
            self._types[dimension] = Datatype.CATEGORICAL
            logger.debug("Dimension {} is now categorical", dimension)
        return code

    def install(self, dimension: int, table: TokenTable) -> None:
        """Attach a fully built table, used when restoring persisted state."""
        if len(table) == 0:
            return
        self._tables[dimension] = table

    def unmap_token(self, code: int, dimension: int) -> str:
        table = self._tables.get(dimension)
        token = None
        if table is not None and _is_integral(code):
            token = table.token(int(code))
        if token is None:
            raise UnknownMappingError(
                f"value '{code}' unknown for dimension {dimension}"
            )
        return token

    def unmap_value(self, token: str, dimension: int) -> int:
        table = self._tables.get(dimension)
        code = table.code(token) if table is not None else None
        if code is None:
            raise UnknownMappingError(
                f"string '{token}' unknown for dimension {dimension}"
            )
        return code

    def count_mappings(self, dimension: int) -> int:
        table = self._tables.get(dimension)
        return 0 if table is None else len(table)
