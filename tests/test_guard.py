"""Tests for cycle detection and depth limits."""

import sys
import threading
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toon_codec import (
    CircularReferenceError,
    DecodeOptions,
    DepthExceededError,
    EncodeOptions,
    decode,
    encode,
)
from toon_codec.guard import TraversalGuard


def nested_objects(levels):
    """Build ``levels`` nested objects around a scalar."""
    value = 1
    for _ in range(levels):
        value = {"k": value}
    return value


def nested_arrays(levels):
    """Build ``levels`` nested arrays around a scalar."""
    value = 1
    for _ in range(levels):
        value = [value]
    return value


class TestTraversalGuard:
    """Test the guard directly."""

    def test_depth_tracking(self):
        guard = TraversalGuard(max_depth=2)
        a, b = {}, {}
        with guard.enter(a):
            assert guard.depth == 1
            with guard.enter(b):
                assert guard.depth == 2
        assert guard.depth == 0

    def test_depth_limit(self):
        guard = TraversalGuard(max_depth=1)
        with guard.enter([]):
            with pytest.raises(DepthExceededError):
                with guard.enter([]):
                    pass

    def test_identity_not_equality(self):
        guard = TraversalGuard(max_depth=5)
        a, b = {"x": 1}, {"x": 1}
        with guard.enter(a), guard.enter(b):
            pass

    def test_reentry(self):
        guard = TraversalGuard(max_depth=5)
        a = []
        with guard.enter(a):
            with pytest.raises(CircularReferenceError):
                with guard.enter(a):
                    pass
        # Closed again, so a sibling visit is fine
        with guard.enter(a):
            pass

    def test_without_identity(self):
        guard = TraversalGuard(max_depth=5, track_identity=False)
        a = []
        with guard.enter(a), guard.enter(a):
            assert guard.depth == 2


class TestCircularReference:
    """Test cycle detection in the encoder."""

    def test_self_referencing_object(self):
        data = {"name": "loop"}
        data["self"] = data
        with pytest.raises(CircularReferenceError) as exc_info:
            encode(data)
        assert exc_info.value.code == "CircularReference"

    def test_self_referencing_list(self):
        data = [1]
        data.append(data)
        with pytest.raises(CircularReferenceError):
            encode({"items": data})

    def test_indirect_cycle(self):
        parent = {"child": {}}
        parent["child"]["parent"] = parent
        with pytest.raises(CircularReferenceError):
            encode(parent)

    def test_cycle_through_list_item(self):
        node = {"id": 1}
        node["children"] = [node]
        with pytest.raises(CircularReferenceError):
            encode(node)

    def test_shared_object_is_not_cycle(self):
        shared = {"x": 1}
        assert encode({"a": shared, "b": shared}) == "a:\n  x: 1\nb:\n  x: 1"

    def test_equal_content_is_not_cycle(self):
        data = {"a": {"x": [1]}, "b": {"x": [1]}}
        assert decode(encode(data)) == data

    def test_shared_list_in_list(self):
        shared = [{"n": {"deep": True}}]
        assert decode(encode([shared, shared])) == [shared, shared]


class TestDepthLimit:
    """Test max_depth on encode and decode."""

    def test_encode_at_limit(self):
        assert encode(nested_objects(3), EncodeOptions(max_depth=3)) == "k:\n  k:\n    k: 1"

    def test_encode_over_limit(self):
        with pytest.raises(DepthExceededError, match="3"):
            encode(nested_objects(4), EncodeOptions(max_depth=3))

    def test_encode_arrays_over_limit(self):
        encode(nested_arrays(3), EncodeOptions(max_depth=3))
        with pytest.raises(DepthExceededError):
            encode(nested_arrays(4), EncodeOptions(max_depth=3))

    def test_tabular_rows_count(self):
        data = {"rows": [{"a": 1}]}
        encode(data, EncodeOptions(max_depth=3))
        with pytest.raises(DepthExceededError):
            encode(data, EncodeOptions(max_depth=2))

    def test_default_limit(self):
        encode(nested_objects(100))
        with pytest.raises(DepthExceededError):
            encode(nested_objects(101))

    def test_decode_at_limit(self):
        text = encode(nested_objects(3))
        assert decode(text, DecodeOptions(max_depth=3)) == nested_objects(3)

    def test_decode_over_limit(self):
        text = encode(nested_objects(4))
        with pytest.raises(DepthExceededError) as exc_info:
            decode(text, DecodeOptions(max_depth=3))
        assert exc_info.value.line_number == 3

    def test_decode_arrays(self):
        text = encode(nested_arrays(4))
        assert decode(text, DecodeOptions(max_depth=4)) == nested_arrays(4)
        with pytest.raises(DepthExceededError):
            decode(text, DecodeOptions(max_depth=3))

    def test_decode_default_limit(self):
        assert decode(encode(nested_objects(100))) == nested_objects(100)
        with pytest.raises(DepthExceededError):
            decode(encode(nested_objects(101), EncodeOptions(max_depth=200)))

    def test_decode_empty_objects_count(self):
        with pytest.raises(DepthExceededError):
            decode("a:\n  b:", DecodeOptions(max_depth=2))

    def test_lenient_still_enforced(self):
        with pytest.raises(DepthExceededError):
            decode(encode(nested_objects(4)), DecodeOptions(strict=False, max_depth=3))


class TestIndependentCalls:
    """Test that calls share no state."""

    def test_failure_does_not_leak(self):
        data = {}
        data["self"] = data
        with pytest.raises(CircularReferenceError):
            encode(data)
        assert encode({"a": {"b": 1}}, EncodeOptions(max_depth=2)) == "a:\n  b: 1"

    def test_concurrent_encodes(self):
        payload = {"users": [{"id": i, "name": f"user{i}"} for i in range(50)]}
        expected = encode(payload)
        results = []

        def worker():
            results.append(decode(encode(payload)) == payload and encode(payload) == expected)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results == [True] * 8
