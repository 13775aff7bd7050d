from pathlib import Path

import pytest

from datamap.data.policies import AssigningPolicy, ValidatingPolicy
from datamap.utils import (
    MapperConfig,
    build_mapper,
    clone_config,
    get_by_dotted_path,
    load_config,
    set_by_dotted_path,
)


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "mapper:\n  policy: validating\n  missing_values: [NA, '?']\n", encoding="utf-8"
    )

    config = load_config(config_file)

    assert config["mapper"]["policy"] == "validating"
    assert config["mapper"]["missing_values"] == ["NA", "?"]


def test_load_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_config(Path("does_not_exist.yaml"))


def test_clone_and_set_by_dotted_path() -> None:
    original = {"mapper": {"policy": "assigning"}}
    cloned = clone_config(original)

    set_by_dotted_path(cloned, "mapper.policy", "validating")
    set_by_dotted_path(cloned, "mapper.dimensionality", 4)

    assert original["mapper"]["policy"] == "assigning"  # original untouched
    assert cloned["mapper"]["policy"] == "validating"
    assert get_by_dotted_path(cloned, "mapper.dimensionality") == 4
    assert get_by_dotted_path(cloned, "mapper.missing", "none") == "none"


def test_mapper_config_defaults() -> None:
    settings = MapperConfig.from_mapping({})

    assert settings == MapperConfig(dimensionality=0, policy="assigning", missing_values=())


def test_build_mapper_from_config() -> None:
    config = {"mapper": {"dimensionality": 3, "policy": "validating", "missing_values": "NA"}}

    mapper = build_mapper(config)

    assert mapper.dimensionality == 3
    assert isinstance(mapper.policy, ValidatingPolicy)
    assert mapper.missing_values == frozenset({"NA"})


def test_build_mapper_applies_overrides_to_a_copy() -> None:
    config = {"mapper": {"policy": "validating"}}

    mapper = build_mapper(config, overrides={"mapper.policy": "assigning"})

    assert isinstance(mapper.policy, AssigningPolicy)
    assert config["mapper"]["policy"] == "validating"


def test_build_mapper_rejects_unknown_policy() -> None:
    with pytest.raises(ValueError):
        build_mapper({"mapper": {"policy": "increment"}})


def test_default_config_builds_validating_mapper() -> None:
    config = load_config(Path(__file__).resolve().parent.parent / "configs" / "default.yaml")

    mapper = build_mapper(config)

    assert isinstance(mapper.policy, ValidatingPolicy)
    assert mapper.missing_values == frozenset({"NA", "?", ""})
