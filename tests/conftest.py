"""Pytest configuration and fixtures for backoff service tests"""
import pytest

from backoff_service import ManualClock, Policy, new


class Flaky:
    """Callable that raises a given number of times before returning"""

    def __init__(self, failures: int, result="Hello World"):
        self.failures = failures
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"FAILED ({self.calls})")
        return self.result


@pytest.fixture
def clock():
    """Manual clock starting at an arbitrary instant"""
    return ManualClock(start=1000.0)


@pytest.fixture
def scenario_policy():
    """Short policy used by the timing scenarios"""
    return Policy(
        start_interval=0.1,
        randomization_factor=0.5,
        interval_multiplier=0.5,
        max_interval=0.5,
        max_elapsed_time=2.0,
    )


@pytest.fixture
def manual_service(clock):
    """Default service whose clock and sleep are driven manually"""
    def build(policy=None):
        service = new(policy)
        service.clock = clock
        service.sleep = clock.sleep
        return service
    return build


@pytest.fixture
def flaky():
    return Flaky
