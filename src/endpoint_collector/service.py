"""Collection pipeline: validate, build, fetch with retries, decode, map."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import requests

from .config import CollectionConfig, EngineSettings
from .decoder import decode
from .errors import Cancelled, CollectorError, ValidationError
from .logging_utils import get_logger
from .mapper import map_output
from .request_builder import build
from .retry import RetryExecutor
from .validator import validate
from .values import PathValue

logger = get_logger("collector")


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CollectionResult:
    success: bool
    data: PathValue = None
    mapped_data: Optional[Dict[str, Optional[PathValue]]] = None
    error: Optional[str] = None
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "data": self.data}
        if self.mapped_data is not None:
            out["mappedData"] = dict(self.mapped_data)
        if self.error is not None:
            out["error"] = self.error
        out["timestamp"] = self.timestamp
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectionResult":
        return cls(
            success=bool(data["success"]),
            data=data.get("data"),
            mapped_data=data.get("mappedData"),
            error=data.get("error"),
            timestamp=int(data.get("timestamp", 0)),
        )


def _failure(error: str) -> CollectionResult:
    return CollectionResult(success=False, data=None, error=error, timestamp=now_ms())


class CollectionService:
    """Runs one request/response cycle per ``collect`` call; holds no per-call state."""

    def __init__(
        self,
        *,
        executor: Optional[RetryExecutor] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.executor = executor or RetryExecutor(settings=settings)

    def close(self) -> None:
        self.executor.close()

    def __enter__(self) -> "CollectionService":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def collect(
        self,
        config: Union[CollectionConfig, Mapping[str, Any]],
        cancel: Optional[threading.Event] = None,
    ) -> CollectionResult:
        """Never raises: every failure ends up in the returned envelope."""
        if not isinstance(config, CollectionConfig):
            config = CollectionConfig.from_dict(config)

        check = validate(config)
        if not check.valid:
            err = ValidationError(check.errors)
            logger.warning("Invalid collection config: %s", err)
            return _failure(str(err))

        try:
            request = build(config)
        except (TypeError, ValueError) as e:
            logger.warning("Could not build request for %s: %s", config.url, e)
            return _failure(f"Could not build request: {e}")

        try:
            response = self.executor.execute(
                request, config.retry_times, config.retry_interval, cancel=cancel
            )
            body = decode(response, config.response_type)
        except Cancelled as e:
            logger.info("Collection from %s cancelled: %s", config.url, e)
            return _failure(str(e))
        except CollectorError as e:
            return _failure(str(e))

        mapped = None
        if config.output_mapping is not None:
            mapped = map_output(body, config.output_mapping)

        logger.debug("Collected %s %s", config.method, request.final_url)
        return CollectionResult(success=True, data=body, mapped_data=mapped, timestamp=now_ms())


def collect(
    config: Union[CollectionConfig, Mapping[str, Any]],
    *,
    session: Optional[requests.Session] = None,
    settings: Optional[EngineSettings] = None,
    cancel: Optional[threading.Event] = None,
) -> CollectionResult:
    with CollectionService(executor=RetryExecutor(session=session, settings=settings)) as svc:
        return svc.collect(config, cancel=cancel)
