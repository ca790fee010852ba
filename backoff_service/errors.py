"""Errors raised by the backoff service"""
from enum import Enum
from typing import Optional


class StopReason(Enum):
    """Ceiling that ended a backoff cycle"""
    ELAPSED_TIME = "elapsed_time"
    MAX_INTERVAL = "max_interval"
    RETRY_COUNT = "retry_count"


class BackoffError(Exception):
    """Base class for backoff service errors"""


class ConfigurationError(BackoffError, ValueError):
    """A policy was rejected before a service could be built"""


class RetryExhaustedError(BackoffError):
    """
    The backoff cycle reached a stop condition before the operation succeeded.

    The last operation error is available as __cause__.
    """

    def __init__(
        self,
        reason: Optional[StopReason] = None,
        attempts: int = 0,
        elapsed: float = 0.0,
    ):
        self.reason = reason
        self.attempts = attempts
        self.elapsed = elapsed
        message = "Backoff function has reached a stop condition and failed"
        if reason is not None:
            message = f"{message} ({reason.value} after {attempts} attempts, {elapsed:.3f}s)"
        super().__init__(message)
