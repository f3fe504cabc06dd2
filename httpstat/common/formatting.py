"""
Result Formatting

Renders a Result as the fixed-width latency report. Content transfer and total
are only known after Result.end(); until then they print as "-".
"""

from datetime import timedelta

from httpstat.tracing.result import Result


def _ms(duration: timedelta) -> int:
    return int(duration / timedelta(milliseconds=1))


def format_result(result: Result) -> str:
    """
    Format a result as a text report

    Args:
        result: Measured result

    Returns:
        str: Multi-line report, per-phase block then cumulative block
    """
    d = result.durations()
    finished = d.total > timedelta(0)

    lines = [
        f"DNS lookup:        {_ms(d.dns_lookup):4d} ms",
        f"TCP connection:    {_ms(d.tcp_connection):4d} ms",
        f"TLS handshake:     {_ms(d.tls_handshake):4d} ms",
        f"Server processing: {_ms(d.server_processing):4d} ms",
        f"Content transfer:  {_ms(d.content_transfer):4d} ms" if finished
        else f"Content transfer:  {'-':>4} ms",
        "",
        f"Name Lookup:    {_ms(d.name_lookup):4d} ms",
        f"Connect:        {_ms(d.connect):4d} ms",
        f"Pre Transfer:   {_ms(d.pre_transfer):4d} ms",
        f"Start Transfer: {_ms(d.start_transfer):4d} ms",
        f"Total:          {_ms(d.total):4d} ms" if finished
        else f"Total:          {'-':>4} ms",
    ]
    return "\n".join(lines) + "\n"
