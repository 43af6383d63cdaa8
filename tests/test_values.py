"""Tests for the path value model."""

from __future__ import annotations

import pytest

from endpoint_collector.values import is_path_value, to_path_value


class TestPathValues:
    def test_json_shapes_are_path_values(self) -> None:
        assert is_path_value(None)
        assert is_path_value({"a": [1, 2.5, "x", False, None, {"b": {}}]})

    def test_foreign_objects_are_not(self) -> None:
        assert not is_path_value(object())
        assert not is_path_value({1: "a"})
        assert not is_path_value([{"a": {1, 2}}])

    def test_to_path_value_normalizes_tuples(self) -> None:
        assert to_path_value({"a": (1, (2, 3))}) == {"a": [1, [2, 3]]}

    def test_to_path_value_rejects_non_str_keys(self) -> None:
        with pytest.raises(TypeError):
            to_path_value({1: "a"})

    def test_to_path_value_rejects_foreign_objects(self) -> None:
        with pytest.raises(TypeError):
            to_path_value([object()])
