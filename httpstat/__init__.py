"""
httpstat

Phase-level latency breakdown (DNS, TCP, TLS, server processing, content
transfer) for a single outbound HTTP request.
"""

from httpstat.tracing.projector import Durations
from httpstat.tracing.result import Result
from httpstat.transport.httpx_trace import with_httpstat

__all__ = [
    "Durations",
    "Result",
    "with_httpstat",
]
