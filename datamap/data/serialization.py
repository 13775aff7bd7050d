"""
Persistence of a mapper's ``{types, maps}`` state.

The invalid-value ledger is ingestion-time diagnostics only and is not stored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..exceptions import InvalidMapperStateError
from .datatype import Datatype, TypeRegistry
from .mapper import DatasetMapper
from .policies import MappingPolicy
from .tables import TokenTable


def mapper_to_dict(mapper: DatasetMapper) -> dict[str, Any]:
    """Return a JSON-ready snapshot with tokens listed in code order."""
    return {
        "types": mapper.types.to_list(),
        "maps": {
            str(dimension): dict(table.items())
            for dimension, table in mapper.table.items()
        },
    }


def _parse_types(raw_types: Any) -> TypeRegistry:
    if not isinstance(raw_types, list):
        raise InvalidMapperStateError("'types' must be a list of datatype names")
    try:
        return TypeRegistry.from_iterable(raw_types)
    except ValueError as exc:
        raise InvalidMapperStateError(f"Unknown datatype in {raw_types!r}") from exc


def _parse_dimension(raw: Any, dimensionality: int) -> int:
    try:
        dimension = int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidMapperStateError(f"Invalid dimension key {raw!r}") from exc
    if not 0 <= dimension < dimensionality:
        raise InvalidMapperStateError(
            f"Mappings for dimension {dimension} but only {dimensionality} types were stored"
        )
    return dimension


def mapper_from_dict(
    payload: Mapping[str, Any],
    *,
    policy: MappingPolicy | None = None,
    missing_values: Iterable[str] = (),
) -> DatasetMapper:
    """Rebuild a mapper, rejecting state that breaks the mapping invariants."""
    if not isinstance(payload, Mapping) or "types" not in payload:
        raise InvalidMapperStateError("Serialized mapper must contain 'types'")
    types = _parse_types(payload["types"])
    raw_maps = payload.get("maps") or {}
    if not isinstance(raw_maps, Mapping):
        raise InvalidMapperStateError("'maps' must be a mapping of dimension to tokens")

    mapper = DatasetMapper(len(types), policy=policy, missing_values=missing_values)
    for dimension, datatype in enumerate(types):
        mapper.set_type(dimension, datatype)

    for raw_dimension, raw_table in raw_maps.items():
        dimension = _parse_dimension(raw_dimension, len(types))
        if not isinstance(raw_table, Mapping):
            raise InvalidMapperStateError(
                f"Mappings for dimension {dimension} must be a token -> code mapping"
            )
        try:
            codes = {str(token): int(code) for token, code in raw_table.items()}
        except (TypeError, ValueError) as exc:
            raise InvalidMapperStateError(
                f"Non-integer code in dimension {dimension}"
            ) from exc
        try:
            table = TokenTable.from_mapping(codes)
        except InvalidMapperStateError as exc:
            raise InvalidMapperStateError(f"Dimension {dimension}: {exc}") from exc
        if len(table) and types[dimension] is not Datatype.CATEGORICAL:
            raise InvalidMapperStateError(
                f"Dimension {dimension} has mappings but is typed {types[dimension].value}"
            )
        mapper.table.install(dimension, table)

    return mapper


def save_mapper(mapper: DatasetMapper, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(mapper_to_dict(mapper), indent=2), encoding="utf-8")
    return path


def load_mapper(
    path: Path,
    *,
    policy: MappingPolicy | None = None,
    missing_values: Iterable[str] = (),
) -> DatasetMapper:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mapper file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidMapperStateError(f"{path} is not valid JSON") from exc
    return mapper_from_dict(payload, policy=policy, missing_values=missing_values)
