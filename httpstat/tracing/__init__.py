"""
Tracing Module Initialization
"""

from httpstat.tracing.projector import (
    Durations,
    content_transfer_at,
    project_durations,
    total_at,
)
from httpstat.tracing.recorder import HOOK_NAMES, LifecycleRecorder
from httpstat.tracing.result import Result

__all__ = [
    "Durations",
    "HOOK_NAMES",
    "LifecycleRecorder",
    "Result",
    "content_transfer_at",
    "project_durations",
    "total_at",
]
