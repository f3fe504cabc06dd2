"""
Test Configuration Module
"""

import pytest


class ManualClock:
    """Monotonic clock advanced explicitly by tests (seconds)"""

    def __init__(self, start: float = 1.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        """Move the clock forward by ms milliseconds"""
        self.now += ms / 1000
        return self.now


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at t=1.0s"""
    return ManualClock()
