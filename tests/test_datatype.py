import pytest

from datamap.data.datatype import Datatype, TypeRegistry
from datamap.exceptions import DimensionOutOfRangeError


def test_registry_defaults_to_numeric():
    registry = TypeRegistry(3)

    assert len(registry) == 3
    assert list(registry) == [Datatype.NUMERIC] * 3


def test_read_out_of_range_raises():
    registry = TypeRegistry(2)

    with pytest.raises(DimensionOutOfRangeError):
        registry.get(2)
    with pytest.raises(IndexError):
        registry[5]


def test_write_out_of_range_grows_with_numeric_slots():
    registry = TypeRegistry(1)

    registry[3] = Datatype.CATEGORICAL

    assert len(registry) == 4
    assert registry.to_list() == ["numeric", "numeric", "numeric", "categorical"]


def test_ensure_never_shrinks():
    registry = TypeRegistry(5)

    registry.ensure(1)

    assert len(registry) == 5


def test_negative_dimension_rejected():
    registry = TypeRegistry(1)

    with pytest.raises(ValueError):
        registry.get(-1)
    with pytest.raises(ValueError):
        registry[-1] = Datatype.NUMERIC


def test_is_categorical_tolerates_unknown_dimensions():
    registry = TypeRegistry.from_iterable(["numeric", "categorical"])

    assert registry.is_categorical(1)
    assert not registry.is_categorical(0)
    assert not registry.is_categorical(7)
