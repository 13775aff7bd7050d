"""Configuration loading and mapper construction helpers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

import yaml

from ..data.mapper import DatasetMapper
from ..data.policies import make_policy


def load_config(config_path: Path) -> Mapping[str, Any]:
    """
    Parse a YAML configuration file into a nested mapping.

    An empty file yields an empty mapping.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def clone_config(config: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of the configuration mapping."""
    return copy.deepcopy(dict(config))


def set_by_dotted_path(
    config: MutableMapping[str, Any],
    dotted_key: str,
    value: Any,
) -> None:
    """
    Assign a value inside a nested mapping using dotted-path syntax.

    Examples
    --------
    >>> cfg = {"mapper": {"policy": "assigning"}}
    >>> set_by_dotted_path(cfg, "mapper.policy", "validating")
    >>> cfg["mapper"]["policy"]
    'validating'
    """
    keys: Sequence[str] = dotted_key.split(".")
    current: MutableMapping[str, Any] = config
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def get_by_dotted_path(config: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Fetch a value from a nested mapping using dotted-path syntax."""
    current: Any = config
    for key in dotted_key.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


@dataclass(frozen=True)
class MapperConfig:
    """Settings read from the ``mapper`` section of a configuration."""

    dimensionality: int = 0
    policy: str = "assigning"
    missing_values: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "MapperConfig":
        raw_missing = get_by_dotted_path(config, "mapper.missing_values", []) or []
        if isinstance(raw_missing, str):
            raw_missing = [raw_missing]
        dimensionality = int(get_by_dotted_path(config, "mapper.dimensionality", 0) or 0)
        if dimensionality < 0:
            raise ValueError("mapper.dimensionality must be non-negative")
        return cls(
            dimensionality=dimensionality,
            policy=str(get_by_dotted_path(config, "mapper.policy", "assigning")),
            missing_values=tuple(str(value) for value in raw_missing),
        )


def build_mapper(
    config: Mapping[str, Any],
    overrides: Mapping[str, Any] | None = None,
) -> DatasetMapper:
    """
    Construct a :class:`DatasetMapper` from a configuration mapping.

    ``overrides`` maps dotted keys (``"mapper.policy"``) to replacement values
    and is applied to a copy, leaving ``config`` untouched.
    """
    if overrides:
        config = clone_config(config)
        for dotted_key, value in overrides.items():
            set_by_dotted_path(config, dotted_key, value)
    settings = MapperConfig.from_mapping(config)
    return DatasetMapper(
        settings.dimensionality,
        policy=make_policy(settings.policy),
        missing_values=settings.missing_values,
    )
