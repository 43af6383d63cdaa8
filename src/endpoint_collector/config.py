from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from . import __version__

DEFAULT_RESPONSE_TYPE = "json"
DEFAULT_RETRY_TIMES = 3
DEFAULT_RETRY_INTERVAL_MS = 1000

OutputMapping = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


def env_flag(name: str, default: bool) -> bool:
    v = os.getenv(name, "true" if default else "false").strip().lower()
    return v in ("1", "true", "yes", "y", "on")


@dataclass(frozen=True)
class CollectionConfig:
    """One collection request. Values are kept as given; ``validate`` judges them."""

    url: Optional[str]
    method: Optional[str]
    headers: Optional[Mapping[str, str]] = None
    query_params: Optional[Mapping[str, str]] = None
    body: Any = None
    response_type: str = DEFAULT_RESPONSE_TYPE
    output_mapping: Optional[OutputMapping] = None
    retry_times: Any = DEFAULT_RETRY_TIMES
    retry_interval: Any = DEFAULT_RETRY_INTERVAL_MS

    def __post_init__(self) -> None:
        # None means "not given" for the defaulted fields
        if self.response_type is None:
            object.__setattr__(self, "response_type", DEFAULT_RESPONSE_TYPE)
        if self.retry_times is None:
            object.__setattr__(self, "retry_times", DEFAULT_RETRY_TIMES)
        if self.retry_interval is None:
            object.__setattr__(self, "retry_interval", DEFAULT_RETRY_INTERVAL_MS)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectionConfig":
        query_params = data.get("queryParams")
        if query_params is None:
            query_params = data.get("params")
        return cls(
            url=data.get("url"),
            method=data.get("method"),
            headers=data.get("headers"),
            query_params=query_params,
            body=data.get("body"),
            response_type=data.get("responseType"),
            output_mapping=data.get("outputMapping"),
            retry_times=data.get("retryTimes"),
            retry_interval=data.get("retryInterval"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"url": self.url, "method": self.method}
        if self.headers is not None:
            out["headers"] = dict(self.headers)
        if self.query_params is not None:
            out["queryParams"] = dict(self.query_params)
        if self.body is not None:
            out["body"] = self.body
        out["responseType"] = self.response_type
        if self.output_mapping is not None:
            if isinstance(self.output_mapping, Mapping):
                out["outputMapping"] = dict(self.output_mapping)
            else:
                out["outputMapping"] = [list(pair) for pair in self.output_mapping]
        out["retryTimes"] = self.retry_times
        out["retryInterval"] = self.retry_interval
        return out


@dataclass(frozen=True)
class EngineSettings:
    request_timeout: float = 30.0
    user_agent: str = f"EndpointCollector/{__version__}"
    progress_bar: bool = True
    workers: int = 4

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            request_timeout=float(os.getenv("COLLECTOR_REQUEST_TIMEOUT", "30")),
            user_agent=os.getenv("COLLECTOR_USER_AGENT", f"EndpointCollector/{__version__}"),
            progress_bar=env_flag("PROGRESS_BAR", True),
            workers=int(os.getenv("PARALLEL_WORKERS", "4")),
        )
