"""Closed value model for decoded response bodies.

A decoded body is one of: ``None``, ``bool``, ``int``/``float``, ``str``,
``list`` of values, or ``dict`` with ``str`` keys mapping to values. Nothing
else is allowed to flow into the path extractor.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

PathValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

_SCALARS = (bool, int, float, str)


def is_path_value(value: Any) -> bool:
    if value is None or isinstance(value, _SCALARS):
        return True
    if isinstance(value, list):
        return all(is_path_value(v) for v in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_path_value(v) for k, v in value.items())
    return False


def to_path_value(value: Any) -> PathValue:
    """Normalize a JSON-like Python object into the closed model.

    Tuples become lists; anything outside the model raises ``TypeError``.
    """
    if value is None or isinstance(value, _SCALARS):
        return value
    if isinstance(value, (list, tuple)):
        return [to_path_value(v) for v in value]
    if isinstance(value, dict):
        out: Dict[str, PathValue] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"mapping keys must be str, got {type(k).__name__}")
            out[k] = to_path_value(v)
        return out
    raise TypeError(f"{type(value).__name__} is not a path value")
