"""Failure taxonomy of the collection engine.

Only :class:`PathNotFoundError` is recovered locally (by the output mapper);
every other error ends the call and is reported in the result envelope.
"""

from __future__ import annotations

from typing import List, Optional

import requests


class CollectorError(Exception):
    """Base class for every engine failure."""


class ValidationError(CollectorError):
    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid configuration")


class TransportError(CollectorError):
    """A single attempt failed below HTTP (refused, timeout, DNS...)."""

    def __init__(self, cause: requests.RequestException) -> None:
        self.cause = cause
        super().__init__(str(cause) or cause.__class__.__name__)


class HTTPStatusError(CollectorError):
    """A single attempt completed with a status outside 200..299."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{status_code} {reason}".strip())


class RetriesExhausted(CollectorError):
    def __init__(
        self,
        attempts: int,
        last_error: Optional[CollectorError] = None,
        last_response: Optional[requests.Response] = None,
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        self.last_response = last_response
        if attempts == 0:
            detail = "no attempts made (retryTimes=0)"
        elif last_error is not None:
            detail = str(last_error)
        else:
            detail = "unknown error"
        super().__init__(f"Request failed: {detail}")


class DecodeError(CollectorError):
    def __init__(self, response_type: str, cause: Optional[Exception] = None) -> None:
        self.response_type = response_type
        self.cause = cause
        msg = f"Could not decode response as {response_type}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)


class PathNotFoundError(CollectorError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path {path!r} does not exist")


class Cancelled(CollectorError):
    def __init__(self, attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(f"Cancelled after {attempts} attempt(s)")
