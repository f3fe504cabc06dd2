"""
Utility Functions Module

Small helpers shared by the tracing and transport layers.
"""

from typing import Any


def strip_port(address: Any) -> str:
    """
    Return the host part of a socket address

    Accepts "host:port", "[v6-host]:port", a bare host or IPv6 literal, or a
    socket address tuple such as ("127.0.0.1", 443).

    Args:
        address: Socket address in any of the forms above, or None

    Returns:
        str: Host without port, "" when address is empty

    Example:
        >>> strip_port("93.184.216.34:443")
        '93.184.216.34'
        >>> strip_port("[2606:2800:220:1::]:443")
        '2606:2800:220:1::'
    """
    if address is None:
        return ""
    if isinstance(address, (tuple, list)):
        return str(address[0]) if address else ""

    text = str(address)
    if text.startswith("["):
        end = text.find("]")
        return text[1:end] if end != -1 else text[1:]
    # More than one colon without brackets is a bare IPv6 literal
    if text.count(":") == 1:
        return text.split(":", 1)[0]
    return text
