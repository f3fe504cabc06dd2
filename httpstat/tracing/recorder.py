"""
Lifecycle Recorder

Turns the partially ordered stream of lifecycle events fired by an HTTP
transport into a fully determined TimestampState.

Transports do not fire every event on every request: a pooled keep-alive
connection skips DNS/connect/TLS, dialing a literal IP skips DNS, and some
transports never report the dial at all. Every cumulative duration is anchored
at ``dns_start``, so the recorder synthesizes the skipped instants instead of
leaving them unset. Events are never rejected; a duplicate simply overwrites.
"""

import logging
import time
from typing import Any, Callable

from httpstat.common.utils import strip_port
from httpstat.domain.timestamps import TimestampState

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Hook names, in causal order for a freshly dialed TLS connection
HOOK_NAMES = (
    "dns_start",
    "dns_done",
    "connect_start",
    "connect_done",
    "tls_handshake_start",
    "tls_handshake_done",
    "got_conn",
    "wrote_request",
    "got_first_response_byte",
)


class LifecycleRecorder:
    """
    Lifecycle Recorder

    One callback per transport lifecycle event, each a constant-time
    stamp-and-branch on the bound state. Not locked: one recorder serves one
    request, whose events the transport delivers in causal order.

    Example:
        state = TimestampState()
        recorder = LifecycleRecorder(state)
        recorder.connect_start()
        recorder.connect_done()
        recorder.wrote_request()
        recorder.got_first_response_byte()
    """

    def __init__(self, state: TimestampState, clock: Clock = time.perf_counter):
        """
        Initialize Recorder

        Args:
            state: State to populate, exclusively owned by this request
            clock: Monotonic clock returning seconds
        """
        self.state = state
        self._clock = clock

    def dns_start(self) -> None:
        self.state.dns_start = self._clock()

    def dns_done(self) -> None:
        self.state.dns_done = self._clock()

    def connect_start(self) -> None:
        state = self.state
        state.tcp_start = self._clock()

        # Dialing an IP literal: no DNS events fire
        if state.dns_start is None:
            state.dns_start = state.tcp_start
            state.dns_done = state.tcp_start
            logger.debug("No DNS lookup observed, anchoring request start at connect start")

    def connect_done(self) -> None:
        self.state.tcp_done = self._clock()

    def tls_handshake_start(self) -> None:
        self.state.uses_tls = True
        self.state.tls_start = self._clock()

    def tls_handshake_done(self) -> None:
        self.state.tls_done = self._clock()

    def got_conn(
        self,
        reused: bool = False,
        local_addr: Any = None,
        remote_addr: Any = None,
    ) -> None:
        """
        Connection acquired from the pool or freshly dialed

        Args:
            reused: Whether the connection is a reused keep-alive connection
            local_addr: Local socket address, port is stripped
            remote_addr: Remote socket address, port is stripped
        """
        state = self.state
        state.conn_acquired = self._clock()
        if reused:
            state.connection_reused = True
        if local_addr is not None:
            state.local_address = strip_port(local_addr)
        if remote_addr is not None:
            state.remote_address = strip_port(remote_addr)

    def wrote_request(self) -> None:
        state = self.state
        now = self._clock()
        state.request_written = now

        if state.connection_reused:
            # DNS/connect/TLS hooks never fire for a pooled connection
            anchor = state.conn_acquired if state.conn_acquired is not None else now
            self._synthesize_dial(anchor, include_tls=True)
            logger.debug("Reused connection, dial phases collapsed to connection acquisition")
        elif state.dns_start is None and state.tcp_start is None:
            # Transport dialed without reporting it
            self._synthesize_dial(now, include_tls=False)
            logger.debug("No dial observed, dial phases collapsed to request written")

    def got_first_response_byte(self) -> None:
        state = self.state
        state.server_done = self._clock()
        state.transfer_start = state.server_done

    def hooks(self) -> dict[str, Callable[..., None]]:
        """
        Named callbacks for registration with a host transport

        Returns:
            dict: Hook name to bound callback, keyed by HOOK_NAMES
        """
        return {name: getattr(self, name) for name in HOOK_NAMES}

    def _synthesize_dial(self, at: float, include_tls: bool) -> None:
        state = self.state
        state.dns_start = at
        state.dns_done = at
        state.tcp_start = at
        state.tcp_done = at
        if include_tls:
            state.tls_start = at
            state.tls_done = at

    def now(self) -> float:
        """Current reading of the recorder's clock"""
        return self._clock()
