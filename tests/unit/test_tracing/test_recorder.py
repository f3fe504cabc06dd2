"""
Lifecycle Recorder Unit Tests
"""

import pytest

from httpstat.domain.timestamps import TimestampState
from httpstat.tracing.recorder import HOOK_NAMES, LifecycleRecorder


class TestRecorderStamping:
    """Per-event stamping"""

    @pytest.fixture(autouse=True)
    def _setup(self, clock):
        self.clock = clock
        self.state = TimestampState()
        self.recorder = LifecycleRecorder(self.state, clock)

    def test_dns_events_stamp_instants(self):
        self.recorder.dns_start()
        self.clock.advance(5)
        self.recorder.dns_done()

        assert self.state.dns_start == 1.0
        assert self.state.dns_done == pytest.approx(1.005)

    def test_connect_start_after_dns_keeps_dns_start(self):
        self.recorder.dns_start()
        self.clock.advance(5)
        self.recorder.dns_done()
        self.clock.advance(1)
        self.recorder.connect_start()

        assert self.state.dns_start == 1.0
        assert self.state.tcp_start == pytest.approx(1.006)

    def test_connect_start_without_dns_synthesizes_dns(self):
        self.clock.advance(3)
        self.recorder.connect_start()

        assert self.state.dns_start == self.state.tcp_start
        assert self.state.dns_done == self.state.tcp_start

    def test_tls_start_marks_tls(self):
        self.recorder.tls_handshake_start()
        self.clock.advance(20)
        self.recorder.tls_handshake_done()

        assert self.state.uses_tls is True
        assert self.state.tls_start == 1.0
        assert self.state.tls_done == pytest.approx(1.02)

    def test_got_conn_strips_ports(self):
        self.recorder.got_conn(
            local_addr="192.168.1.10:53211",
            remote_addr=("93.184.216.34", 443),
        )

        assert self.state.conn_acquired == 1.0
        assert self.state.connection_reused is False
        assert self.state.local_address == "192.168.1.10"
        assert self.state.remote_address == "93.184.216.34"

    def test_got_conn_reused_flag_is_sticky(self):
        self.recorder.got_conn(reused=True)
        self.recorder.got_conn(reused=False)

        assert self.state.connection_reused is True

    def test_first_byte_sets_transfer_start(self):
        self.clock.advance(40)
        self.recorder.got_first_response_byte()

        assert self.state.server_done == self.state.transfer_start

    def test_duplicate_event_overwrites(self):
        self.recorder.connect_start()
        self.clock.advance(10)
        self.recorder.connect_start()

        assert self.state.tcp_start == pytest.approx(1.01)
        # Request start stays anchored at the first connect attempt
        assert self.state.dns_start == 1.0


class TestRecorderFallbackSynthesis:
    """Synthesis applied when the request is written"""

    @pytest.fixture(autouse=True)
    def _setup(self, clock):
        self.clock = clock
        self.state = TimestampState()
        self.recorder = LifecycleRecorder(self.state, clock)

    def test_no_dial_observed_collapses_to_request_written(self):
        self.clock.advance(7)
        self.recorder.wrote_request()

        now = self.state.request_written
        assert self.state.dns_start == now
        assert self.state.dns_done == now
        assert self.state.tcp_start == now
        assert self.state.tcp_done == now
        # TLS is left alone when no reuse was reported
        assert self.state.tls_start is None

    def test_reused_connection_collapses_to_conn_acquired(self):
        self.recorder.got_conn(reused=True)
        acquired = self.state.conn_acquired
        self.clock.advance(2)
        self.recorder.wrote_request()

        for name in ("dns_start", "dns_done", "tcp_start", "tcp_done", "tls_start", "tls_done"):
            assert getattr(self.state, name) == acquired
        assert self.state.request_written > acquired

    def test_reused_without_acquired_instant_uses_request_written(self):
        self.state.connection_reused = True
        self.clock.advance(2)
        self.recorder.wrote_request()

        assert self.state.dns_start == self.state.request_written
        assert self.state.tls_done == self.state.request_written

    def test_observed_dial_is_not_overwritten(self):
        self.recorder.dns_start()
        self.clock.advance(5)
        self.recorder.dns_done()
        self.recorder.connect_start()
        self.clock.advance(10)
        self.recorder.connect_done()
        self.clock.advance(1)
        self.recorder.wrote_request()

        assert self.state.dns_start == 1.0
        assert self.state.tcp_done == pytest.approx(1.015)


class TestRecorderHooks:
    """Hook bundle"""

    def test_hooks_cover_every_event(self, clock):
        recorder = LifecycleRecorder(TimestampState(), clock)

        hooks = recorder.hooks()

        assert tuple(hooks) == HOOK_NAMES
        assert all(callable(fn) for fn in hooks.values())

    def test_hooks_write_into_bound_state(self, clock):
        state = TimestampState()
        hooks = LifecycleRecorder(state, clock).hooks()

        hooks["connect_start"]()
        hooks["got_conn"](reused=False, remote_addr="10.1.2.3:80")

        assert state.tcp_start == 1.0
        assert state.remote_address == "10.1.2.3"
