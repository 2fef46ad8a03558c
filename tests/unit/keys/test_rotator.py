"""Tests for the API key rotator."""

import pytest

from chatgate.core.modules.keys.rotator import KeyRotator


class TestKeyRotator:
    """Round-robin behavior of KeyRotator.next()."""

    def test_empty_pool_returns_none(self):
        """Test that no keys means no key, every time."""
        rotator = KeyRotator([])
        assert rotator.next() is None
        assert rotator.next() is None
        assert rotator.size == 0

    def test_single_key_repeats(self):
        rotator = KeyRotator(["only"])
        assert [rotator.next() for _ in range(3)] == ["only", "only", "only"]

    @pytest.mark.parametrize("count", [2, 3, 5])
    def test_each_key_once_per_cycle_in_order(self, count):
        """Test that N calls return each of N keys exactly once, in configured order, repeatedly."""
        keys = [f"key-{i}" for i in range(count)]
        rotator = KeyRotator(keys)
        first_cycle = [rotator.next() for _ in range(count)]
        second_cycle = [rotator.next() for _ in range(count)]
        assert first_cycle == keys
        assert second_cycle == keys

    def test_blank_keys_are_dropped(self):
        """Test that empty and whitespace-only keys never enter the pool."""
        rotator = KeyRotator(["a", "", "   ", "b"])
        assert rotator.size == 2
        assert [rotator.next() for _ in range(4)] == ["a", "b", "a", "b"]
