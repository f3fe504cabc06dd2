"""
httpx Trace Adapter

Binds a Result to httpx's ``trace`` request extension. httpcore reports each
step of a request as "<prefix>.<step>.started|complete|failed" events; this
module maps them onto the lifecycle recorder hooks.

httpcore resolves host names inside connect_tcp, so DNS is never observed on
its own and the recorder anchors the request start at connect start. A
request whose headers are sent without any connect event went out on a pooled
connection and is reported as reused.
"""

import logging
from typing import Any, Optional

from httpstat.common.utils import strip_port
from httpstat.tracing.result import Result

logger = logging.getLogger(__name__)

_CONNECT_STEPS = ("connection.connect_tcp", "connection.connect_unix_socket")
# Tunnelling proxies run the origin handshake under the "proxy" prefix
_TLS_STEPS = ("connection.start_tls", "proxy.start_tls")
_HTTP_PREFIXES = ("http11.", "http2.")


def _stream_address(stream: Any, key: str) -> Any:
    get_extra_info = getattr(stream, "get_extra_info", None)
    if get_extra_info is None:
        return None
    return get_extra_info(key)


def record_stream_addresses(result: Result, stream: Any) -> None:
    """
    Fill in missing local/remote addresses from a network stream

    Args:
        result: Result to update; addresses already captured are kept
        stream: httpcore network stream (or anything with get_extra_info)
    """
    state = result.state
    if not state.local_address:
        state.local_address = strip_port(_stream_address(stream, "client_addr"))
    if not state.remote_address:
        state.remote_address = strip_port(_stream_address(stream, "server_addr"))


class HttpxTracer:
    """
    Trace callback for httpx.Client

    One tracer per request. Register with
    ``client.get(url, extensions={"trace": HttpxTracer(result)})``.
    """

    def __init__(self, result: Result):
        self.result = result
        self._dialed = False
        self._stream: Any = None

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        self.dispatch(event_name, info)

    def dispatch(self, event_name: str, info: dict[str, Any]) -> None:
        """
        Route one httpcore trace event to the recorder

        Args:
            event_name: e.g. "connection.connect_tcp.started"
            info: Event payload; "return_value" on complete events
        """
        recorder = self.result.recorder
        step, _, phase = event_name.rpartition(".")

        if phase == "failed":
            logger.debug("Trace step failed: %s (%s)", step, info.get("exception"))
            return

        if step in _CONNECT_STEPS:
            if phase == "started":
                self._dialed = True
                recorder.connect_start()
            elif phase == "complete":
                self._stream = info.get("return_value")
                recorder.connect_done()
        elif step in _TLS_STEPS:
            if phase == "started":
                recorder.tls_handshake_start()
            elif phase == "complete":
                self._stream = info.get("return_value") or self._stream
                recorder.tls_handshake_done()
        elif step.startswith(_HTTP_PREFIXES):
            self._dispatch_http(step.split(".", 1)[1], phase)
        else:
            logger.debug("Ignoring trace event: %s", event_name)

    def _dispatch_http(self, step: str, phase: str) -> None:
        recorder = self.result.recorder
        if step == "send_request_headers" and phase == "started":
            recorder.got_conn(
                reused=not self._dialed,
                local_addr=_stream_address(self._stream, "client_addr"),
                remote_addr=_stream_address(self._stream, "server_addr"),
            )
        elif step == "send_request_body" and phase == "complete":
            recorder.wrote_request()
        elif step == "receive_response_headers" and phase == "complete":
            recorder.got_first_response_byte()


class AsyncHttpxTracer(HttpxTracer):
    """
    Trace callback for httpx.AsyncClient

    httpcore awaits the trace callback on async connections, so the callback
    must be a coroutine function.
    """

    async def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        self.dispatch(event_name, info)


def with_httpstat(
    result: Result,
    extensions: Optional[dict[str, Any]] = None,
    asynchronous: bool = False,
) -> dict[str, Any]:
    """
    Build request extensions that record latency into result

    Args:
        result: Fresh Result for this request
        extensions: Existing request extensions to extend
        asynchronous: True when the request goes through httpx.AsyncClient

    Returns:
        dict: Extensions with the "trace" callback set

    Example:
        result = Result()
        with httpx.Client() as client:
            response = client.get(url, extensions=with_httpstat(result))
            result.end()
            record_stream_addresses(result, response.extensions["network_stream"])
    """
    tracer_cls = AsyncHttpxTracer if asynchronous else HttpxTracer
    merged = dict(extensions or {})
    merged["trace"] = tracer_cls(result)
    return merged
