"""Construction of backoff services"""
import functools
import logging
from typing import Callable, Dict, Optional, Type

from .algorithm import Algorithm, BackoffServiceAPI
from .errors import ConfigurationError
from .exponential import ExponentialBackoff
from .policy import Policy, resolve_algorithm, validate_policy

logger = logging.getLogger(__name__)

ALGORITHMS: Dict[Algorithm, Type[BackoffServiceAPI]] = {
    Algorithm.EXPONENTIAL: ExponentialBackoff,
}


def new(policy: Optional[Policy] = None) -> BackoffServiceAPI:
    """
    Build a backoff service for retrying an operation

    Args:
        policy: Backoff requirements; defaults for every field when omitted

    Returns:
        A service that has been set up from the policy

    Raises:
        ConfigurationError: the policy is invalid or names an unknown algorithm
    """
    if policy is None:
        policy = Policy()

    validate_policy(policy)

    algorithm = resolve_algorithm(policy.algorithm)
    service_cls = ALGORITHMS.get(algorithm)
    if service_cls is None:
        raise ConfigurationError("The selected backoff algorithm is not valid")

    service = service_cls()
    service.setup(policy)
    logger.debug(f"Created {algorithm.name.lower()} backoff service")

    return service


def retry(policy: Optional[Policy] = None) -> Callable:
    """
    Decorator that retries the wrapped function with backoff.

    Every call gets its own service, so decorated functions may be called
    from several threads at once.
    """
    validate_policy(policy or Policy())

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            service = new(policy)
            return service.execute_function(lambda: func(*args, **kwargs))
        return wrapper

    return decorator
