"""Tests for array layout selection."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toon_codec.arrays import ArrayFormat, select_array_format, tabular_fields


class TestSelectArrayFormat:
    """Test the tabular > primitive > list priority."""

    def test_uniform_records_are_tabular(self):
        arr = [{"id": 1, "name": "Alice"}, {"name": "Bob", "id": 2}]
        assert select_array_format(arr) is ArrayFormat.TABULAR

    def test_scalars_are_primitive(self):
        assert select_array_format([1, "a", None, True, 2.5]) is ArrayFormat.PRIMITIVE

    def test_empty_is_list(self):
        assert select_array_format([]) is ArrayFormat.LIST

    def test_different_keys_is_list(self):
        assert select_array_format([{"a": 1}, {"a": 1, "b": 2}]) is ArrayFormat.LIST

    def test_nested_value_is_list(self):
        assert select_array_format([{"a": {"b": 1}}]) is ArrayFormat.LIST
        assert select_array_format([{"a": []}]) is ArrayFormat.LIST

    def test_mixed_objects_and_scalars_is_list(self):
        assert select_array_format([{"a": 1}, 1]) is ArrayFormat.LIST

    def test_empty_objects_are_list(self):
        assert select_array_format([{}, {}]) is ArrayFormat.LIST

    def test_nested_arrays_are_list(self):
        assert select_array_format([[1], [2]]) is ArrayFormat.LIST


class TestTabularFields:
    """Test column derivation."""

    def test_sorted_columns(self):
        assert tabular_fields([{"role": "x", "id": 1, "name": "y"}]) == ["id", "name", "role"]

    def test_not_tabular(self):
        assert tabular_fields([1, 2]) is None
        assert tabular_fields([]) is None
