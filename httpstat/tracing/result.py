"""
Request Latency Result

Caller-facing measurement object: owns the timestamp state of one request,
the recorder that fills it, and the finalizer that closes it.

Usage:
    result = Result()
    response = client.get(url, extensions=with_httpstat(result))
    response.read()
    result.end()
    print(result.server_processing, result.total_time)

Preconditions (misuse is not reported as an error):
- one Result measures exactly one request; reuse gives undefined values.
- end() is called once, after the response body was fully read. Before that,
  content_transfer and total read as zero.
"""

import time
from datetime import timedelta
from typing import Callable, Optional

from httpstat.domain.timestamps import TimestampState
from httpstat.tracing.projector import (
    Durations,
    content_transfer_at,
    project_durations,
    total_at,
)
from httpstat.tracing.recorder import Clock, LifecycleRecorder


class Result:
    """
    Latency Result of a single HTTP request

    Duration properties are pure reads over the recorded instants and may be
    queried at any time; unreached phases report zero.
    """

    def __init__(self, clock: Clock = time.perf_counter):
        """
        Initialize Result

        Args:
            clock: Monotonic clock returning seconds. Instants passed to
                end(), total() and content_transfer() must come from it.
        """
        self.state = TimestampState()
        self.recorder = LifecycleRecorder(self.state, clock)

    def end(self, t: Optional[float] = None) -> None:
        """
        Mark the response body as fully read

        Does nothing when no request was observed, so the result stays empty.

        Args:
            t: Instant the body was drained, defaults to now
        """
        if self.state.dns_start is None:
            return
        self.state.transfer_done = self.recorder.now() if t is None else t

    def total(self, t: Optional[float] = None) -> timedelta:
        """
        Total duration from request start to t

        Args:
            t: Instant after the body was read, defaults to now

        Returns:
            timedelta: Running total, zero if the request never started
        """
        return total_at(self.state, self.recorder.now() if t is None else t)

    def content_transfer(self, t: Optional[float] = None) -> timedelta:
        """
        Content transfer duration from first response byte to t

        Args:
            t: Instant after the body was read, defaults to now

        Returns:
            timedelta: Running transfer time, zero before the first byte
        """
        return content_transfer_at(self.state, self.recorder.now() if t is None else t)

    def durations(self) -> Durations:
        return project_durations(self.state)

    def as_dict(self) -> dict[str, float]:
        """Durations keyed by name, in milliseconds"""
        return self.durations().as_dict()

    @property
    def dns_lookup(self) -> timedelta:
        return self.durations().dns_lookup

    @property
    def tcp_connection(self) -> timedelta:
        return self.durations().tcp_connection

    @property
    def tls_handshake(self) -> timedelta:
        return self.durations().tls_handshake

    @property
    def server_processing(self) -> timedelta:
        return self.durations().server_processing

    @property
    def content_transfer_time(self) -> timedelta:
        """Content transfer fixed by end(), zero before it"""
        return self.durations().content_transfer

    @property
    def name_lookup(self) -> timedelta:
        return self.durations().name_lookup

    @property
    def connect(self) -> timedelta:
        return self.durations().connect

    @property
    def pre_transfer(self) -> timedelta:
        return self.durations().pre_transfer

    @property
    def start_transfer(self) -> timedelta:
        return self.durations().start_transfer

    @property
    def total_time(self) -> timedelta:
        """Total fixed by end(), zero before it"""
        return self.durations().total

    @property
    def is_tls(self) -> bool:
        return self.state.uses_tls

    @property
    def is_reused(self) -> bool:
        return self.state.connection_reused

    @property
    def is_finished(self) -> bool:
        """Whether end() recorded a transfer completion"""
        return self.state.transfer_done is not None

    def local_ip(self) -> str:
        return self.state.local_address

    def remote_ip(self) -> str:
        return self.state.remote_address

    def hooks(self) -> dict[str, Callable[..., None]]:
        """Lifecycle callbacks bound to this result, keyed by hook name"""
        return self.recorder.hooks()

    def __repr__(self) -> str:
        d = self.durations()
        return (
            f"<Result start_transfer={d.start_transfer} total={d.total} "
            f"tls={self.is_tls} reused={self.is_reused}>"
        )
