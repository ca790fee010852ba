"""Exponential backoff algorithm"""
import logging
import random
import time
from typing import Any, Callable, Optional

from .algorithm import Action, BackoffServiceAPI, Function, STOP
from .clock import Clock, SystemClock
from .errors import RetryExhaustedError, StopReason
from .policy import Policy

logger = logging.getLogger(__name__)

# Starting wait time per cycle, in seconds.
DEFAULT_EXPONENTIAL_INITIAL_INTERVAL = 0.5
# Factor by which the interval fluctuates per wait.
DEFAULT_EXPONENTIAL_RAND_FACTOR = 0.5
# Multiplication factor for the interval.
DEFAULT_EXPONENTIAL_MULTIPLIER = 1.5
# Largest wait a cycle may reach, in seconds.
DEFAULT_EXPONENTIAL_MAX_INTERVAL = 60.0
# Longest a cycle may run before giving up, in seconds.
DEFAULT_EXPONENTIAL_MAX_ELAPSED_TIME = 15 * 60.0
# Zero means no limit on the number of retries.
DEFAULT_EXPONENTIAL_MAX_RETRY_COUNT = 0

# Width added to the jitter range so its upper bound can be drawn (one nanosecond).
_RESOLUTION = 1e-9


class ExponentialBackoff(BackoffServiceAPI):
    """
    Exponential backoff with randomized intervals.

    Each instance owns its interval state and random stream. Running two
    cycles on the same instance at the same time corrupts that state; give
    every concurrent caller its own instance.
    """

    def __init__(self, policy: Optional[Policy] = None):
        self.reset_defaults()

        self.current_interval = 0.0
        self.start_time = 0.0
        self.retry_count = 0
        self.last_stop_reason: Optional[StopReason] = None
        self._random = random.Random()

        if policy is not None:
            self.setup(policy)

    def setup(self, policy: Policy) -> None:
        """Set the execution properties from a policy, keeping defaults for zero fields"""
        self.reset_defaults()

        if policy.start_interval:
            self.initial_interval = policy.start_interval
        if policy.randomization_factor:
            self.randomization_factor = policy.randomization_factor
        if policy.interval_multiplier:
            self.interval_multiplier = policy.interval_multiplier
        if policy.max_interval:
            self.max_interval = policy.max_interval
        if policy.max_elapsed_time:
            self.max_elapsed_time = policy.max_elapsed_time
        if policy.max_retry_count:
            self.max_retry_count = policy.max_retry_count

    def reset_defaults(self) -> None:
        self.initial_interval = DEFAULT_EXPONENTIAL_INITIAL_INTERVAL
        self.randomization_factor = DEFAULT_EXPONENTIAL_RAND_FACTOR
        self.interval_multiplier = DEFAULT_EXPONENTIAL_MULTIPLIER
        self.max_interval = DEFAULT_EXPONENTIAL_MAX_INTERVAL
        self.max_elapsed_time = DEFAULT_EXPONENTIAL_MAX_ELAPSED_TIME
        self.max_retry_count = DEFAULT_EXPONENTIAL_MAX_RETRY_COUNT
        self.clock: Clock = SystemClock()
        self.sleep: Callable[[float], None] = time.sleep

    def reset(self) -> None:
        """Prepare a new cycle; must run before the first next_backoff() of every cycle"""
        self._random = random.Random(time.time_ns())
        self.current_interval = self.initial_interval
        self.start_time = self.clock.now()
        self.retry_count = 0
        self.last_stop_reason = None

    def elapsed_time(self) -> float:
        return self.clock.now() - self.start_time

    def next_backoff(self) -> float:
        """
        Determine how long to wait before the next attempt.

        Also advances the interval for the following call. Returns STOP once
        the elapsed time exceeds max_elapsed_time, the retry count is used up,
        or growing the interval again would reach max_interval.
        """
        if self.max_elapsed_time and self.elapsed_time() > self.max_elapsed_time:
            return self._stop(StopReason.ELAPSED_TIME)

        if self.max_retry_count and self.retry_count >= self.max_retry_count:
            return self._stop(StopReason.RETRY_COUNT)

        delta = self.randomization_factor * self.current_interval
        min_interval = self.current_interval - delta
        max_interval = self.current_interval + delta

        self.current_interval = min_interval + self._random.random() * (max_interval - min_interval + _RESOLUTION)

        if self.current_interval >= self.max_interval / self.interval_multiplier:
            self.current_interval = self.max_interval
            return self._stop(StopReason.MAX_INTERVAL)

        self.current_interval = self.current_interval * self.interval_multiplier
        self.retry_count += 1

        return self.current_interval

    def execute_function(self, op: Function) -> Any:
        """
        Run op with exponential backoff and return its output.

        Raises:
            RetryExhaustedError: a stop condition was reached before op
                returned; the last error op raised is chained as its cause
        """
        self.reset()
        attempts = 0

        while True:
            attempts += 1
            try:
                return op()
            except Exception as e:
                wait = self.next_backoff()
                if wait == STOP:
                    logger.warning(
                        f"Giving up after {attempts} attempts "
                        f"({self.last_stop_reason.value}, {self.elapsed_time():.3f}s elapsed): {e}"
                    )
                    raise RetryExhaustedError(
                        reason=self.last_stop_reason,
                        attempts=attempts,
                        elapsed=self.elapsed_time(),
                    ) from e
                logger.debug(f"Attempt {attempts} failed: {e}; retrying in {wait:.3f}s")

            self.sleep(wait)

    def execute_action(self, op: Action) -> None:
        """Run op with exponential backoff, fire and forget"""
        self.execute_function(op)

    def _stop(self, reason: StopReason) -> float:
        self.last_stop_reason = reason
        return STOP
