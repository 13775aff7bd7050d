import numpy as np
import pytest

from datamap.data.mapper import DatasetMapper
from datamap.data.policies import ValidatingPolicy
from datamap.data.reports import (
    RangeViolation,
    check_range,
    ledger_frame,
    mapping_summary,
)


def _mapper() -> DatasetMapper:
    mapper = DatasetMapper(policy=ValidatingPolicy(), missing_values={"NA"})
    mapper.map_tokens(["x", "NA", "y", "NA"], 0)
    mapper.map_tokens(["1", "2", "3", "4"], 1)
    return mapper


def test_ledger_frame_lists_every_invalid_cell():
    frame = ledger_frame(_mapper())

    assert list(frame.columns) == ["token", "dimension", "row"]
    assert frame.to_dict("records") == [
        {"token": "NA", "dimension": 0, "row": 1},
        {"token": "NA", "dimension": 0, "row": 3},
    ]


def test_ledger_frame_empty():
    frame = ledger_frame(DatasetMapper())

    assert frame.empty
    assert list(frame.columns) == ["token", "dimension", "row"]


def test_mapping_summary():
    summary = mapping_summary(_mapper())

    assert summary.to_dict("records") == [
        {"dimension": 0, "datatype": "categorical", "mappings": 2, "invalid": 2},
        {"dimension": 1, "datatype": "numeric", "mappings": 0, "invalid": 0},
    ]


def test_check_range_all_dimensions_skips_nan():
    matrix = np.array([[0.0, 10.0], [np.nan, -5.0], [3.0, 1.0]])

    violations = check_range(matrix, minimum=0.0, maximum=5.0)

    assert violations == [
        RangeViolation(row=0, dimension=1, value=10.0, bound="maximum"),
        RangeViolation(row=1, dimension=1, value=-5.0, bound="minimum"),
    ]


def test_check_range_single_dimension():
    matrix = np.array([[9.0, 10.0], [1.0, 1.0]])

    violations = check_range(matrix, maximum=5.0, dimension=0)

    assert violations == [RangeViolation(row=0, dimension=0, value=9.0, bound="maximum")]


def test_check_range_requires_a_bound():
    with pytest.raises(ValueError):
        check_range(np.zeros((1, 1)))
    with pytest.raises(ValueError):
        check_range(np.zeros((1, 1)), minimum=0.0, dimension=3)
