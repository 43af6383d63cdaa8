"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
import requests

from endpoint_collector.config import EngineSettings
from endpoint_collector.retry import RetryExecutor
from endpoint_collector.service import CollectionService

Outcome = Union[requests.Response, Exception]


def _response(
    status: int = 200,
    body: Any = None,
    reason: Optional[str] = None,
    text: Optional[str] = None,
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason if reason is not None else HTTPStatus(status).phrase
    if text is None:
        text = "" if body is None else json.dumps(body)
    resp._content = text.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class ScriptedSession:
    """Stand-in for ``requests.Session`` that replays a fixed list of outcomes.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: List[Outcome], on_request: Optional[Callable[[int], None]] = None) -> None:
        self.outcomes = list(outcomes)
        self.on_request = on_request
        self.calls: List[Dict[str, Any]] = []
        self.headers: Dict[str, str] = {}
        self.closed = False

    def _next(self) -> requests.Response:
        index = min(len(self.calls) - 1, len(self.outcomes) - 1)
        if self.on_request is not None:
            self.on_request(len(self.calls))
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._next()

    def head(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": "HEAD", "url": url, **kwargs})
        return self._next()

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Build a ``requests.Response`` with the given status and JSON body (or raw text)."""
    return _response


@pytest.fixture
def scripted_session() -> Callable[..., ScriptedSession]:
    return ScriptedSession


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(request_timeout=2.0, progress_bar=False, workers=2)


@pytest.fixture
def make_service(settings: EngineSettings) -> Callable[[ScriptedSession], CollectionService]:
    """Provide a CollectionService wired to a scripted session."""

    def factory(session: ScriptedSession) -> CollectionService:
        return CollectionService(executor=RetryExecutor(session=session, settings=settings))

    return factory
