"""
Measuring HTTP Client Integration Tests

Runs HttpClient against a local keep-alive HTTP server so the trace events
come from httpcore itself rather than from a replayed event list.
"""

import threading
from datetime import timedelta
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from httpstat.common.http_client import HttpClient


class KeepAliveHandler(BaseHTTPRequestHandler):
    """Answers every GET with a short body on a persistent connection"""

    protocol_version = "HTTP/1.1"

    def do_GET(self):
        body = b"pong"
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture(scope="module")
def server_url():
    """Base URL of a loopback HTTP server running in a background thread"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), KeepAliveHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


class TestHttpClientLive:
    """Fresh and pooled connections over loopback"""

    def test_fresh_then_pooled_connection(self, server_url, monkeypatch):
        for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
            monkeypatch.delenv(name, raising=False)

        with HttpClient(base_url=server_url, timeout=5) as client:
            first = client.get("/ping")
            second = client.get("/ping")

        assert first.response.text == "pong"
        assert second.response.text == "pong"

        fresh = first.result
        assert fresh.is_finished is True
        assert fresh.is_reused is False
        assert fresh.is_tls is False
        assert fresh.state.tcp_start is not None
        assert fresh.state.tcp_done is not None
        assert fresh.tls_handshake == timedelta(0)
        assert fresh.pre_transfer == fresh.connect
        assert fresh.local_ip() == "127.0.0.1"
        assert fresh.remote_ip() == "127.0.0.1"
        d = fresh.durations()
        assert d.name_lookup <= d.connect <= d.pre_transfer <= d.start_transfer <= d.total

        pooled = second.result
        assert pooled.is_finished is True
        assert pooled.is_reused is True
        assert pooled.dns_lookup == timedelta(0)
        assert pooled.tcp_connection == timedelta(0)
        assert pooled.tls_handshake == timedelta(0)
        assert pooled.start_transfer >= pooled.server_processing
        assert pooled.total_time >= pooled.start_transfer
        assert pooled.remote_ip() == "127.0.0.1"
