import json
from pathlib import Path

import pytest

from datamap.data.datatype import Datatype
from datamap.data.mapper import DatasetMapper
from datamap.data.policies import ValidatingPolicy
from datamap.data.serialization import (
    load_mapper,
    mapper_from_dict,
    mapper_to_dict,
    save_mapper,
)
from datamap.exceptions import InvalidMapperStateError


def _populated_mapper() -> DatasetMapper:
    mapper = DatasetMapper(3, missing_values={"NA"})
    mapper.map_tokens(["red", "blue", "NA", "red"], 0)
    mapper.map_tokens(["1", "2", "3", "4"], 1)
    mapper.map_tokens(["s", "m", "l", "m"], 2)
    return mapper


def test_to_dict_lists_tokens_in_code_order_and_skips_ledger():
    payload = mapper_to_dict(_populated_mapper())

    assert payload["types"] == ["categorical", "numeric", "categorical"]
    assert list(payload["maps"]["0"].items()) == [("red", 0), ("blue", 1)]
    assert "1" not in payload["maps"]
    assert "ledger" not in payload


def test_dict_round_trip():
    mapper = _populated_mapper()

    restored = mapper_from_dict(mapper_to_dict(mapper))

    assert restored == mapper
    assert restored.unmap_token(2, 2) == "l"
    assert restored.type(1) is Datatype.NUMERIC
    assert restored.count_invalid(0) == 0


def test_file_round_trip(tmp_path: Path) -> None:
    mapper = _populated_mapper()
    target = save_mapper(mapper, tmp_path / "nested" / "mapper.json")

    restored = load_mapper(target, policy=ValidatingPolicy(), missing_values={"NA"})

    assert restored == mapper
    assert isinstance(restored.policy, ValidatingPolicy)
    assert restored.missing_values == frozenset({"NA"})
    assert json.loads(target.read_text(encoding="utf-8"))["types"][0] == "categorical"


def test_load_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_mapper(Path("does_not_exist.json"))


@pytest.mark.parametrize(
    "payload",
    [
        {"types": ["categorical"], "maps": {"0": {"a": 0, "b": 2}}},
        {"types": ["categorical"], "maps": {"0": {"a": 1}}},
        {"types": ["categorical"], "maps": {"0": {"a": 0, "b": 0}}},
        {"types": ["categorical"], "maps": {"1": {"a": 0}}},
        {"types": ["numeric"], "maps": {"0": {"a": 0}}},
        {"types": ["ordinal"], "maps": {}},
        {"maps": {}},
    ],
)
def test_from_dict_rejects_invalid_state(payload):
    with pytest.raises(InvalidMapperStateError):
        mapper_from_dict(payload)
