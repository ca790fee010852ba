"""Backoff policy and its validation"""
import math
from dataclasses import dataclass
from typing import Union

from .algorithm import Algorithm
from .errors import ConfigurationError


@dataclass(frozen=True)
class Policy:
    """
    Requirements for a backoff retry operation.

    Durations are in seconds. Any field left at zero falls back to the
    algorithm default when the service is set up.
    """
    algorithm: Union[Algorithm, int] = Algorithm.EXPONENTIAL
    interval_multiplier: float = 0.0
    max_elapsed_time: float = 0.0
    max_interval: float = 0.0
    max_retry_count: int = 0
    randomization_factor: float = 0.0
    start_interval: float = 0.0


def resolve_algorithm(value: Union[Algorithm, int]) -> Algorithm:
    """Map an algorithm selector to a known Algorithm"""
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(value)
    except ValueError:
        raise ConfigurationError(f"The selected backoff algorithm [ {value!r} ] is not valid")


def validate_policy(policy: Policy) -> None:
    """
    Reject a malformed policy

    Raises:
        ConfigurationError: randomization factor outside [0, 1], unknown
            algorithm, or a negative or non-finite duration, multiplier or
            retry count
    """
    if not 0 <= policy.randomization_factor <= 1:
        raise ConfigurationError(
            f"the provided randomization factor of [ {policy.randomization_factor:f} ] is not allowed. "
            "The allowed range of values is from 0 to 1"
        )

    resolve_algorithm(policy.algorithm)

    for name in ("interval_multiplier", "start_interval", "max_interval", "max_elapsed_time", "max_retry_count"):
        value = getattr(policy, name)
        if not math.isfinite(value) or value < 0:
            raise ConfigurationError(f"the provided {name} of [ {value} ] must be a finite, non-negative number")
