"""Connectivity checks for collection targets. Probes report, they never raise."""

from __future__ import annotations

import socket
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests

from .logging_utils import get_logger

logger = get_logger("probe")

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


@dataclass
class ConnectivityResult:
    url: str
    success: bool = False
    status: Optional[int] = None
    status_text: Optional[str] = None
    error: Optional[str] = None
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DnsResult:
    hostname: str
    success: bool = False
    addresses: List[str] = field(default_factory=list)
    error: Optional[str] = None
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def check_url(
    url: str,
    timeout: float = 5.0,
    session: Optional[requests.Session] = None,
) -> ConnectivityResult:
    """HEAD ``url`` once; success means a 2xx answer within ``timeout`` seconds."""
    result = ConnectivityResult(url=url)
    http = session or requests
    start = time.monotonic()
    try:
        resp = http.head(url, headers=NO_CACHE_HEADERS, timeout=timeout, allow_redirects=True)
        result.status = resp.status_code
        result.status_text = resp.reason
        result.success = 200 <= resp.status_code < 300
    except requests.Timeout:
        result.error = f"Connection timed out ({timeout:g}s)"
    except requests.RequestException as e:
        result.error = str(e) or e.__class__.__name__
    result.duration_ms = _elapsed_ms(start)
    return result


def check_urls(
    urls: Sequence[str],
    timeout: float = 5.0,
    workers: int = 4,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """Probe every URL concurrently; ``first_reachable`` follows input order."""
    by_url: Dict[str, ConnectivityResult] = {}
    if urls:
        with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
            futs = {ex.submit(check_url, u, timeout, session): u for u in urls}
            for fut in as_completed(futs):
                by_url[futs[fut]] = fut.result()

    results = [by_url[u] for u in urls]
    first = next((r.url for r in results if r.success), None)
    return {"results": results, "first_reachable": first}


def check_dns(hostname: str) -> DnsResult:
    result = DnsResult(hostname=hostname)
    start = time.monotonic()
    try:
        infos = socket.getaddrinfo(hostname, None)
        seen: List[str] = []
        for info in infos:
            addr = info[4][0]
            if addr not in seen:
                seen.append(addr)
        result.addresses = seen
        result.success = bool(seen)
        if not seen:
            result.error = "No addresses returned"
    except (socket.gaierror, UnicodeError) as e:
        result.error = str(e)
    result.duration_ms = _elapsed_ms(start)
    return result


def diagnose_host(
    host: str,
    timeout: float = 5.0,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """Resolve ``host`` then try HTTPS, falling back to HTTP."""
    dns = check_dns(host)
    out: Dict[str, Any] = {"host": host, "dns": dns, "http": None, "success": False}
    if not dns.success:
        logger.warning("DNS lookup failed for %s: %s", host, dns.error)
        return out

    for scheme in ("https", "http"):
        probe = check_url(f"{scheme}://{host}", timeout=timeout, session=session)
        out["http"] = probe
        if probe.success:
            out["success"] = True
            break
    return out
