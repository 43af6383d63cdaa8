from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Optional, Tuple

from .config import OutputMapping
from .errors import CollectorError
from .extractor import resolve
from .logging_utils import get_logger
from .values import PathValue

logger = get_logger("collector")


def mapping_items(mapping: OutputMapping) -> Iterable[Tuple[str, str]]:
    if isinstance(mapping, Mapping):
        return mapping.items()
    return [(name, path) for name, path in mapping]


def map_output(root: PathValue, mapping: OutputMapping) -> Dict[str, Optional[PathValue]]:
    """
    Project ``root`` onto a flat record, one slot per output field.

    A field whose path cannot be resolved is set to None without touching the others.
    When the same field name appears more than once, the last rule wins.
    """
    result: Dict[str, Optional[PathValue]] = {}
    for name, path in mapping_items(mapping):
        try:
            result[name] = resolve(root, path)
        except CollectorError as e:
            logger.debug("Field %s unresolved: %s", name, e)
            result[name] = None
    return result
