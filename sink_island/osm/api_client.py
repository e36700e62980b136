"""
Overpass API client

Posts Overpass QL queries with a minimum interval between requests and
linear backoff on transient failures (timeouts, HTTP 429/502/503/504).
"""

import threading
import time
from typing import Any, Dict, Optional

import requests
from loguru import logger

from ..config import APIConfig, get_config


RETRYABLE_STATUS = frozenset({429, 502, 503, 504})


class OverpassError(RuntimeError):
    """Raised when Overpass cannot answer a query"""


class OverpassAPIClient:
    """Client for the Overpass interpreter endpoint"""

    def __init__(self, api_config: Optional[APIConfig] = None, session: Optional[requests.Session] = None):
        self.api_config = api_config or get_config().api
        self.session = session or requests.Session()
        self.requests_sent = 0
        self._last_request_time = 0.0
        self._rate_lock = threading.Lock()

    def _wait_turn(self):
        with self._rate_lock:
            interval = self.api_config.min_request_interval
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < interval:
                time.sleep(interval - elapsed)
            self._last_request_time = time.monotonic()

    def _backoff(self, attempt: int) -> float:
        return self.api_config.retry_delay * (attempt + 1)

    def _post(self, query: str) -> requests.Response:
        self._wait_turn()
        self.requests_sent += 1
        response = self.session.post(
            self.api_config.overpass_url,
            data={"data": query},
            headers={"User-Agent": self.api_config.user_agent},
            timeout=self.api_config.overpass_timeout
        )
        response.raise_for_status()
        return response

    def query(self, query: str) -> Dict[str, Any]:
        """
        Run an Overpass QL query

        Returns:
            Decoded JSON payload

        Raises:
            OverpassError: when every attempt failed, on a non-retryable HTTP
                status, or when Overpass reports a runtime error in the payload
        """
        attempts = self.api_config.max_retries
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = self._post(query)
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status not in RETRYABLE_STATUS:
                    raise OverpassError(f"Overpass returned HTTP {status}") from e
                last_error = e
            except requests.exceptions.RequestException as e:
                # Timeouts and connection resets
                last_error = e
            else:
                return self._decode(response)

            if attempt < attempts - 1:
                wait = self._backoff(attempt)
                logger.warning(f"Overpass attempt {attempt + 1}/{attempts} failed ({last_error}), "
                               f"retrying in {wait:.1f}s")
                time.sleep(wait)

        logger.error(f"Overpass query failed after {attempts} attempts")
        raise OverpassError(f"Overpass query failed after {attempts} attempts: {last_error}") from last_error

    @staticmethod
    def _decode(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise OverpassError("Overpass answered with a non-JSON body") from e

        # Overpass reports query timeouts and memory exhaustion as 200 + remark
        remark = data.get("remark", "")
        if "runtime error" in remark:
            raise OverpassError(f"Overpass runtime error: {remark}")
        return data
