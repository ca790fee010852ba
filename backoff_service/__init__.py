"""Backoff Service - Retry fallible operations with exponential backoff"""
__version__ = "0.1.0"

from .algorithm import Algorithm, BackoffServiceAPI, STOP
from .clock import Clock, SystemClock, ManualClock
from .errors import BackoffError, ConfigurationError, RetryExhaustedError, StopReason
from .policy import Policy, validate_policy
from .exponential import ExponentialBackoff
from .service import new, retry
from .config import load_policy, policy_from_dict, policy_from_env

__all__ = [
    "Algorithm",
    "BackoffServiceAPI",
    "STOP",
    "Clock",
    "SystemClock",
    "ManualClock",
    "BackoffError",
    "ConfigurationError",
    "RetryExhaustedError",
    "StopReason",
    "Policy",
    "validate_policy",
    "ExponentialBackoff",
    "new",
    "retry",
    "load_policy",
    "policy_from_dict",
    "policy_from_env",
]
