"""
Duration Projector

Pure functions that read a TimestampState and compute the public duration set.

Timeline of the cumulative checkpoints, all measured from ``dns_start``:

    |--name_lookup
    |--|--connect
    |--|--|--pre_transfer
    |--|--|--|--start_transfer
    |--|--|--|--|--total

Any difference involving an unset instant is zero, and negative differences
clamp to zero, so unreached phases read as zero rather than raising.
"""

from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Optional

from httpstat.domain.timestamps import TimestampState

ZERO = timedelta(0)


@dataclass(frozen=True)
class Durations:
    """
    Duration Set of one request

    Per-phase durations followed by cumulative checkpoints.
    """

    # Per phase
    dns_lookup: timedelta = ZERO
    tcp_connection: timedelta = ZERO
    tls_handshake: timedelta = ZERO
    server_processing: timedelta = ZERO
    # Zero until the result is finalized
    content_transfer: timedelta = ZERO

    # Cumulative from request start
    name_lookup: timedelta = ZERO
    connect: timedelta = ZERO
    pre_transfer: timedelta = ZERO
    start_transfer: timedelta = ZERO
    # Zero until the result is finalized
    total: timedelta = ZERO

    def as_dict(self) -> dict[str, float]:
        """
        Name-keyed view in milliseconds, for key/value reporting

        Returns:
            dict: Field name to duration (ms)
        """
        return {name: to_ms(value) for name, value in asdict(self).items()}


def to_ms(duration: timedelta) -> float:
    """Convert a duration to milliseconds"""
    return duration / timedelta(milliseconds=1)


def _between(start: Optional[float], end: Optional[float]) -> timedelta:
    if start is None or end is None or end <= start:
        return ZERO
    return timedelta(seconds=end - start)


def project_durations(state: TimestampState) -> Durations:
    """
    Compute all durations from the recorded instants

    Args:
        state: Recorded instants

    Returns:
        Durations: Per-phase and cumulative durations
    """
    connect = _between(state.dns_start, state.tcp_done)

    if state.uses_tls:
        tls_handshake = _between(state.tls_start, state.tls_done)
        pre_transfer = _between(state.dns_start, state.tls_done)
    else:
        tls_handshake = ZERO
        # Without TLS the request can be sent as soon as the connection is up
        pre_transfer = connect if state.request_written is not None else ZERO

    # An empty measurement stays empty even if transfer_done was stamped
    if state.dns_start is None:
        content_transfer = ZERO
    else:
        content_transfer = _between(state.transfer_start, state.transfer_done)

    return Durations(
        dns_lookup=_between(state.dns_start, state.dns_done),
        tcp_connection=_between(state.tcp_start, state.tcp_done),
        tls_handshake=tls_handshake,
        server_processing=_between(state.request_written, state.server_done),
        content_transfer=content_transfer,
        name_lookup=_between(state.dns_start, state.dns_done),
        connect=connect,
        pre_transfer=pre_transfer,
        start_transfer=_between(state.dns_start, state.server_done),
        total=_between(state.dns_start, state.transfer_done),
    )


def total_at(state: TimestampState, t: float) -> timedelta:
    """
    Total duration as of an arbitrary instant

    Args:
        state: Recorded instants
        t: Instant read from the same clock the recorder uses

    Returns:
        timedelta: t - dns_start, zero if the request never started
    """
    return _between(state.dns_start, t)


def content_transfer_at(state: TimestampState, t: float) -> timedelta:
    """
    Content transfer duration as of an arbitrary instant

    Args:
        state: Recorded instants
        t: Instant read from the same clock the recorder uses

    Returns:
        timedelta: t - server_done, zero if no response byte was seen
    """
    return _between(state.server_done, t)
