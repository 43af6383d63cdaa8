from __future__ import annotations

import threading
import time
from typing import Optional

import requests

from .config import EngineSettings
from .errors import Cancelled, CollectorError, HTTPStatusError, RetriesExhausted, TransportError
from .logging_utils import get_logger
from .request_builder import PreparedRequest

logger = get_logger("collector")


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class RetryExecutor:
    """
    Issue a prepared request up to ``retry_times`` times with a fixed pause between tries.
    The executor keeps no per-call state; one instance may serve concurrent callers.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self._owns_session = session is None
        self.session = session or requests.Session()
        if self._owns_session:
            self.session.headers.update({"User-Agent": self.settings.user_agent})

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def _attempt(self, request: PreparedRequest) -> requests.Response:
        data = request.body.encode("utf-8") if request.body is not None else None
        try:
            return self.session.request(
                request.method,
                request.final_url,
                headers=request.headers,
                data=data,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            raise TransportError(e) from e

    def execute(
        self,
        request: PreparedRequest,
        retry_times: int,
        retry_interval: int,
        cancel: Optional[threading.Event] = None,
    ) -> requests.Response:
        """
        Return the first 2xx response. Transport failures and non-2xx responses both count
        as failed attempts; once ``retry_times`` attempts are spent, raise RetriesExhausted
        carrying the last response's status if any attempt got one, else the last transport error.
        ``retry_interval`` is in milliseconds and only separates attempts.
        """
        delay = retry_interval / 1000.0
        last_response: Optional[requests.Response] = None
        last_transport: Optional[TransportError] = None

        for attempt in range(1, retry_times + 1):
            if cancel is not None and cancel.is_set():
                raise Cancelled(attempt - 1)

            next_delay = delay if attempt < retry_times else 0.0
            try:
                resp = self._attempt(request)
            except TransportError as e:
                last_transport = e
                logger.warning(
                    "Request error on %s %s (attempt %d/%d, next delay %.2fs): %s",
                    request.method, request.final_url, attempt, retry_times, next_delay, e,
                )
            else:
                if is_success(resp.status_code):
                    return resp
                last_response = resp
                logger.warning(
                    "HTTP %s on %s %s (attempt %d/%d, next delay %.2fs)",
                    resp.status_code, request.method, request.final_url, attempt, retry_times, next_delay,
                )

            if attempt < retry_times:
                if cancel is not None:
                    if cancel.wait(delay):
                        raise Cancelled(attempt)
                else:
                    time.sleep(delay)

        last_error: Optional[CollectorError] = last_transport
        if last_response is not None:
            last_error = HTTPStatusError(last_response.status_code, last_response.reason or "")
        exhausted = RetriesExhausted(retry_times, last_error=last_error, last_response=last_response)
        logger.error("%s %s: %s", request.method, request.final_url, exhausted)
        raise exhausted
