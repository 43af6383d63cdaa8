"""Dot-path traversal over decoded bodies."""

from __future__ import annotations

from typing import List

from .errors import PathNotFoundError
from .values import PathValue


def split_path(path: str) -> List[str]:
    if not isinstance(path, str) or path == "":
        raise PathNotFoundError(str(path))
    return path.split(".")


def _step(current: PathValue, segment: str, path: str) -> PathValue:
    if isinstance(current, dict):
        if segment not in current:
            raise PathNotFoundError(path)
        return current[segment]
    if isinstance(current, list) and segment.isdecimal():
        index = int(segment)
        if index >= len(current):
            raise PathNotFoundError(path)
        return current[index]
    # None, scalars, or a list addressed by name
    raise PathNotFoundError(path)


def resolve(root: PathValue, path: str) -> PathValue:
    """
    Resolve ``path`` (e.g. ``"data.price.value"``) against ``root``.

    Each segment descends into a mapping member; a decimal segment may also index a list.
    A missing member, a null or scalar along the way, or an empty path raises PathNotFoundError.
    """
    current = root
    for segment in split_path(path):
        current = _step(current, segment, path)
    return current
