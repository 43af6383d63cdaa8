from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .config import CollectionConfig

DEFAULT_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class PreparedRequest:
    final_url: str
    method: str
    headers: Dict[str, str]
    body: Optional[str] = None


def append_query(url: str, params: Dict[str, str]) -> str:
    """Append ``params`` to the query of ``url``; existing pairs are left alone."""
    if not params:
        return url
    parts = urlsplit(url)
    extra = urlencode([(str(k), str(v)) for k, v in params.items()])
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def build(config: CollectionConfig) -> PreparedRequest:
    """Turn a validated config into the concrete outbound request."""
    headers: CaseInsensitiveDict = CaseInsensitiveDict(DEFAULT_HEADERS)
    headers.update(config.headers or {})

    body: Optional[str] = None
    if config.method != "GET" and config.body is not None:
        body = json.dumps(config.body)

    return PreparedRequest(
        final_url=append_query(config.url, dict(config.query_params or {})),
        method=config.method,
        headers=dict(headers),
        body=body,
    )
