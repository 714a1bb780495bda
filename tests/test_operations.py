"""Tests for src.azuresearch.operations covering JSON loading and batching.

Run with coverage:
    pytest tests/test_operations.py --maxfail=1 -v --cov=src.azuresearch.operations --cov-report=term-missing
"""

import json

import pytest

from src.azuresearch.errors import UnsupportedOperationError
from src.azuresearch.operations import (
    AddOperation,
    DeleteOperation,
    iter_batches,
    load_operations,
    operation_from_dict,
)


def test_load_operations_streams_adds_and_deletes(tmp_path):
    path = tmp_path / "ops.json"
    path.write_text(
        json.dumps(
            [
                {"action": "add", "reference": "doc1", "metadata": {"title": "T", "tags": ["a", "b"], "n": 3}},
                {"action": "DELETE", "reference": "doc2"},
            ]
        )
    )
    ops = list(load_operations(path))
    assert ops == [
        AddOperation("doc1", {"title": ["T"], "tags": ["a", "b"], "n": ["3"]}),
        DeleteOperation("doc2"),
    ]


def test_operation_from_dict_drops_empty_values():
    op = operation_from_dict({"action": "add", "reference": "r", "metadata": {"a": None, "b": [], "c": "x"}})
    assert op.metadata == {"c": ["x"]}


def test_operation_from_dict_rejects_unknown_action():
    with pytest.raises(UnsupportedOperationError):
        operation_from_dict({"action": "merge", "reference": "r"})


@pytest.mark.parametrize("reference", [None, "", "   "])
def test_operation_from_dict_requires_reference(reference):
    with pytest.raises(ValueError):
        operation_from_dict({"action": "add", "reference": reference})


def test_load_operations_rejects_non_objects(tmp_path):
    path = tmp_path / "ops.json"
    path.write_text(json.dumps(["nope"]))
    with pytest.raises(ValueError):
        list(load_operations(path))


def test_iter_batches_preserves_order():
    ops = [DeleteOperation(str(i)) for i in range(5)]
    batches = list(iter_batches(ops, 2))
    assert [len(b) for b in batches] == [2, 2, 1]
    assert [op for b in batches for op in b] == ops
    assert list(iter_batches([], 3)) == []


def test_iter_batches_rejects_zero_size():
    with pytest.raises(ValueError):
        list(iter_batches([DeleteOperation("a")], 0))


def test_load_operations_reports_malformed_json(tmp_path):
    path = tmp_path / "ops.json"
    path.write_text('[{"action": "delete", "reference": "a"}, {"action":')
    with pytest.raises(ValueError, match="Malformed"):
        list(load_operations(path))
