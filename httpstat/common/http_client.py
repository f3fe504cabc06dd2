"""
HTTP Client Wrapper Module

Provides sync and async HTTP clients that measure each request with a fresh
Result: the trace extension is attached, the body is fully drained, and the
result is finalized before it is handed back.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from httpstat.common.errors import RequestFailedError
from httpstat.config import get_settings
from httpstat.tracing.result import Result
from httpstat.transport.httpx_trace import record_stream_addresses, with_httpstat

logger = logging.getLogger(__name__)


@dataclass
class MeasuredResponse:
    """
    Measured Response

    A fully read response together with its finalized latency result.
    """

    response: httpx.Response
    result: Result

    @property
    def status_code(self) -> int:
        return self.response.status_code


def _finish(result: Result, response: httpx.Response) -> None:
    result.end()
    stream = response.extensions.get("network_stream")
    if stream is not None:
        record_stream_addresses(result, stream)


def _failure(method: str, url: Any, result: Result, exc: httpx.HTTPError) -> RequestFailedError:
    logger.warning("Measured request %s %s failed: %s", method, url, exc)
    return RequestFailedError(
        message=f"{method} {url} failed: {exc}",
        details={
            "method": method,
            "url": str(url),
            "exception": type(exc).__name__,
            "durations_ms": result.as_dict(),
        },
    )


def _client_options(
    base_url: str,
    timeout: Optional[float],
    headers: Optional[dict[str, str]],
) -> dict[str, Any]:
    settings = get_settings()
    return {
        "base_url": base_url,
        "timeout": httpx.Timeout(timeout or settings.HTTP_TIMEOUT),
        "headers": headers or {},
        "verify": settings.HTTP_VERIFY_TLS,
    }


class HttpClient:
    """
    Synchronous Measuring HTTP Client

    Wraps httpx.Client. Connections are pooled across measure() calls, so
    later requests to the same origin report as reused connections. Redirects
    are never followed; each hop needs its own measure() call.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HTTP Client

        Args:
            base_url: Base URL
            timeout: Request timeout (seconds), defaults to configuration
            headers: Default request headers
            transport: Custom httpx transport
        """
        self._options = _client_options(base_url, timeout, headers)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(transport=self._transport, **self._options)
        return self._client

    def close(self) -> None:
        """Close HTTP Client"""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def measure(self, method: str, url: str, **kwargs: Any) -> MeasuredResponse:
        """
        Send a request and measure its latency phases

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL (relative to base_url)
            **kwargs: Other httpx request parameters

        Returns:
            MeasuredResponse: Read response and finalized result

        Raises:
            RequestFailedError: The transport failed; details carry the
                durations measured so far
        """
        result = Result()
        extensions = with_httpstat(result, kwargs.pop("extensions", None))
        # One Result measures one request: a redirect is returned, not followed
        kwargs["follow_redirects"] = False
        client = self._get_client()
        try:
            with client.stream(method, url, extensions=extensions, **kwargs) as response:
                response.read()
                _finish(result, response)
        except httpx.HTTPError as exc:
            raise _failure(method, url, result, exc) from exc

        logger.debug("Measured %s %s: %s", method, url, result)
        return MeasuredResponse(response=response, result=result)

    def get(self, url: str, **kwargs: Any) -> MeasuredResponse:
        return self.measure("GET", url, **kwargs)


class AsyncHttpClient:
    """
    Asynchronous Measuring HTTP Client

    Wraps httpx.AsyncClient, registering the coroutine trace callback.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP Client

        Args:
            base_url: Base URL
            timeout: Request timeout (seconds), defaults to configuration
            headers: Default request headers
            transport: Custom httpx async transport
        """
        self._options = _client_options(base_url, timeout, headers)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport, **self._options)
        return self._client

    async def close(self) -> None:
        """Close HTTP Client"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def measure(self, method: str, url: str, **kwargs: Any) -> MeasuredResponse:
        """
        Send a request and measure its latency phases

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL (relative to base_url)
            **kwargs: Other httpx request parameters

        Returns:
            MeasuredResponse: Read response and finalized result

        Raises:
            RequestFailedError: The transport failed; details carry the
                durations measured so far
        """
        result = Result()
        extensions = with_httpstat(result, kwargs.pop("extensions", None), asynchronous=True)
        # One Result measures one request: a redirect is returned, not followed
        kwargs["follow_redirects"] = False
        client = await self._get_client()
        try:
            async with client.stream(method, url, extensions=extensions, **kwargs) as response:
                await response.aread()
                _finish(result, response)
        except httpx.HTTPError as exc:
            raise _failure(method, url, result, exc) from exc

        logger.debug("Measured %s %s: %s", method, url, result)
        return MeasuredResponse(response=response, result=result)

    async def get(self, url: str, **kwargs: Any) -> MeasuredResponse:
        return await self.measure("GET", url, **kwargs)
