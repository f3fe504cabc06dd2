"""
Request Timestamp State

Holds the instants at which each lifecycle boundary of one HTTP request was
observed. Instants are monotonic clock readings in seconds; ``None`` means the
boundary was never observed.
"""

from dataclasses import dataclass, fields
from typing import Optional

# Lifecycle boundaries in the order a fresh connection passes through them
INSTANT_FIELDS = (
    "dns_start",
    "dns_done",
    "tcp_start",
    "tcp_done",
    "tls_start",
    "tls_done",
    "conn_acquired",
    "request_written",
    "server_done",
    "transfer_start",
    "transfer_done",
)


@dataclass
class TimestampState:
    """
    Timestamp State of a single request measurement

    Owned by exactly one in-flight request. Populated by LifecycleRecorder,
    finalized once by Result.end(), then read-only.
    """

    dns_start: Optional[float] = None
    dns_done: Optional[float] = None
    tcp_start: Optional[float] = None
    tcp_done: Optional[float] = None
    tls_start: Optional[float] = None
    tls_done: Optional[float] = None
    conn_acquired: Optional[float] = None
    request_written: Optional[float] = None
    server_done: Optional[float] = None
    transfer_start: Optional[float] = None
    # Only set by the finalizer
    transfer_done: Optional[float] = None

    # True once a TLS handshake start was observed
    uses_tls: bool = False
    # True when the acquired connection came from the keep-alive pool
    connection_reused: bool = False

    # Host part (port stripped) of the socket addresses
    local_address: str = ""
    remote_address: str = ""

    def is_zero(self, name: str) -> bool:
        """Whether the named instant was never stamped"""
        return getattr(self, name) is None

    def is_set(self, name: str) -> bool:
        """Whether the named instant was stamped"""
        return getattr(self, name) is not None

    def is_empty(self) -> bool:
        """Whether no lifecycle boundary was observed at all"""
        return all(self.is_zero(name) for name in INSTANT_FIELDS)

    def snapshot(self) -> dict:
        """
        Copy of all fields as a plain dict

        Returns:
            dict: Field name to value
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}
