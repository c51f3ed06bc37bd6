"""Tests for the value model."""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toon_codec import UnsupportedTypeError, ValueKind, deep_equal, kind_of
from toon_codec.values import is_container, is_primitive


class TestKindOf:
    """Test variant classification."""

    def test_scalars(self):
        assert kind_of(None) is ValueKind.NULL
        assert kind_of(True) is ValueKind.BOOL
        assert kind_of(0) is ValueKind.NUMBER
        assert kind_of(1.5) is ValueKind.NUMBER
        assert kind_of("") is ValueKind.STRING

    def test_containers(self):
        assert kind_of([]) is ValueKind.ARRAY
        assert kind_of(()) is ValueKind.ARRAY
        assert kind_of({}) is ValueKind.OBJECT

    @pytest.mark.parametrize("value", [set(), b"bytes", Decimal("1"), object(), {1: "a"}])
    def test_unsupported(self, value):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            kind_of(value)
        assert exc_info.value.code == "UnsupportedType"

    def test_predicates(self):
        assert is_primitive("x")
        assert not is_primitive([])
        assert is_container({})
        assert not is_container(None)


class TestDeepEqual:
    """Test structural equality."""

    def test_numbers_by_value(self):
        assert deep_equal(1, 1.0)
        assert deep_equal({"a": [1, 2.0]}, {"a": [1.0, 2]})

    def test_bool_is_not_number(self):
        assert not deep_equal(True, 1)
        assert not deep_equal([0], [False])

    def test_tuple_equals_list(self):
        assert deep_equal((1, (2,)), [1, [2]])

    def test_key_order_ignored(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_differences(self):
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})
        assert not deep_equal([1, 2], [1])
        assert not deep_equal("1", 1)
        assert not deep_equal(None, {})
