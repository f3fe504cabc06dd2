"""
Domain Model Module Initialization
"""

from httpstat.domain.timestamps import INSTANT_FIELDS, TimestampState

__all__ = [
    "INSTANT_FIELDS",
    "TimestampState",
]
