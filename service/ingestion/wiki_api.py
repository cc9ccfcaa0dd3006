"""
MediaWiki API access with per-request retry and exponential backoff.

Uses tenacity rather than manual retry logic.

Retry strategy:
  - Up to settings.http_max_attempts attempts
  - Exponential backoff with jitter to prevent retry storms
  - Only retries on 5xx and network errors. 4xx means WE sent a bad request,
    so retrying won't help

This covers a single HTTP request. Whether a whole message is fetched again
after a failure is decided by whoever drives the message, not here.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from config import settings
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)


class WikiAPIError(Exception):
    """The API answered, but with an error payload instead of a result."""

    def __init__(self, code: str, info: str):
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info


def _is_retryable(exc: BaseException) -> bool:
    """
    Retry on network errors and 5xx responses.
    Do NOT retry on 4xx: those are client errors (our bug, not upstream's).
    """
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.NetworkError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


def build_http_client(**kwargs: Any) -> httpx.AsyncClient:
    """AsyncClient with the relay's timeout and User-Agent."""
    kwargs.setdefault("timeout", settings.http_timeout_seconds)
    kwargs.setdefault("headers", {"User-Agent": settings.user_agent})
    return httpx.AsyncClient(**kwargs)


class WikiAPI:
    def __init__(self, http: Optional[httpx.AsyncClient] = None, url: Optional[str] = None):
        self.url = url or settings.wiki_api_url
        self._http = http or build_http_client()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(settings.http_max_attempts),
            wait=wait_exponential_jitter(multiplier=settings.http_backoff_initial, max=settings.http_backoff_max),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def query(self, **params: Any) -> Dict[str, Any]:
        """
        Run an action=query request and return its "query" object.

        Raises the last httpx exception if all retries are exhausted,
        WikiAPIError if the API reports an error or the body is not a JSON object.
        """
        params = {"action": "query", "format": "json", **params}
        logger.debug("Querying %s with %s", self.url, params)

        async for attempt in self._retrying():
            with attempt:
                response = await self._http.get(self.url, params=params)
                response.raise_for_status()

        try:
            data = response.json()
        except ValueError as exc:
            raise WikiAPIError("invalid_json", f"Response is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise WikiAPIError("invalid_json", f"Expected a JSON object, got {type(data).__name__}")
        if "error" in data:
            error = data["error"]
            raise WikiAPIError(error.get("code", "unknown"), error.get("info", ""))
        return data.get("query", {})
