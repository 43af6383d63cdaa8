from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List
from urllib.parse import urlsplit

from .config import CollectionConfig

SUPPORTED_METHODS = ("GET", "POST")
RESPONSE_TYPES = ("json", "text")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _is_absolute_uri(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def _is_non_negative_int(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_header_text(value: Any) -> bool:
    # http.client encodes header names and values as Latin-1
    if not isinstance(value, str):
        return False
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


def _is_output_mapping(value: Any) -> bool:
    if isinstance(value, Mapping):
        return all(isinstance(k, str) for k in value)
    if isinstance(value, (list, tuple)):
        return all(
            isinstance(pair, (list, tuple)) and len(pair) == 2 and isinstance(pair[0], str)
            for pair in value
        )
    return False


def validate(config: CollectionConfig) -> ValidationResult:
    """Collect every problem with ``config``; never raises."""
    errors: List[str] = []

    if not config.url:
        errors.append("url is required")
    elif not isinstance(config.url, str) or not _is_absolute_uri(config.url):
        errors.append(f"url is not a valid absolute URI: {config.url!r}")

    if config.method not in SUPPORTED_METHODS:
        errors.append(f"unsupported method: {config.method!r} (expected GET or POST)")

    if not _is_non_negative_int(config.retry_times):
        errors.append("retryTimes must be a non-negative integer")

    if not _is_non_negative_int(config.retry_interval):
        errors.append("retryInterval must be a non-negative integer")

    if config.response_type not in RESPONSE_TYPES:
        errors.append(f"unsupported responseType: {config.response_type!r} (expected json or text)")

    if config.headers is not None:
        if not isinstance(config.headers, Mapping):
            errors.append("headers must be a mapping of strings")
        else:
            bad = [k for k, v in config.headers.items() if not _is_header_text(k) or not _is_header_text(v)]
            if bad:
                errors.append(f"headers must be Latin-1 strings: {', '.join(map(repr, bad))}")

    if config.query_params is not None and not isinstance(config.query_params, Mapping):
        errors.append("queryParams must be a mapping of strings")

    if config.output_mapping is not None and not _is_output_mapping(config.output_mapping):
        errors.append("outputMapping must be a mapping or a list of [field, path] pairs")

    return ValidationResult(valid=not errors, errors=errors)
