"""
Transport Integration Module Initialization
"""

from httpstat.transport.httpx_trace import (
    AsyncHttpxTracer,
    HttpxTracer,
    record_stream_addresses,
    with_httpstat,
)

__all__ = [
    "AsyncHttpxTracer",
    "HttpxTracer",
    "record_stream_addresses",
    "with_httpstat",
]
