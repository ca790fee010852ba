"""Load backoff policies from YAML files and environment variables"""
import os
import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv

from .algorithm import Algorithm
from .errors import ConfigurationError
from .policy import Policy, validate_policy

logger = logging.getLogger(__name__)

ENV_PREFIX = "BACKOFF_"
CONFIG_FILE_ENV = "BACKOFF_CONFIG_FILE"

_FLOAT_FIELDS = (
    "interval_multiplier",
    "max_elapsed_time",
    "max_interval",
    "randomization_factor",
    "start_interval",
)
_INT_FIELDS = ("max_retry_count",)


def _parse_algorithm(value: Any) -> Algorithm:
    if isinstance(value, Algorithm):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name in Algorithm.__members__:
            return Algorithm[name]
        if name.lstrip("-").isdigit():
            value = int(name)
    try:
        return Algorithm(value)
    except ValueError:
        raise ConfigurationError(f"The selected backoff algorithm [ {value!r} ] is not valid")


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(environ.get(name, default))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring {name}={environ.get(name)!r}: not a number")
        return default


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, default))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring {name}={environ.get(name)!r}: not an integer")
        return default


def policy_from_dict(data: Mapping[str, Any]) -> Policy:
    """
    Build a policy from a mapping of field names to values

    Raises:
        ConfigurationError: unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(Policy)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown policy settings: {', '.join(sorted(unknown))}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        try:
            if key == "algorithm":
                values[key] = _parse_algorithm(value)
            elif key in _INT_FIELDS:
                values[key] = int(value)
            else:
                values[key] = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid value for {key}: {value!r}")

    return Policy(**values)


def policy_from_env(
    environ: Optional[Mapping[str, str]] = None,
    base: Optional[Policy] = None,
    prefix: str = ENV_PREFIX,
) -> Policy:
    """
    Override a policy with BACKOFF_* environment variables

    Args:
        environ: Environment to read; os.environ when omitted
        base: Policy whose fields are kept when a variable is not set
        prefix: Variable name prefix
    """
    if environ is None:
        environ = os.environ
    policy = base or Policy()

    overrides: Dict[str, Any] = {}
    algorithm = environ.get(f"{prefix}ALGORITHM")
    if algorithm:
        overrides["algorithm"] = _parse_algorithm(algorithm)
    for name in _FLOAT_FIELDS:
        key = f"{prefix}{name.upper()}"
        if key in environ:
            overrides[name] = _read_float(environ, key, getattr(policy, name))
    for name in _INT_FIELDS:
        key = f"{prefix}{name.upper()}"
        if key in environ:
            overrides[name] = _read_int(environ, key, getattr(policy, name))

    return replace(policy, **overrides)


def load_policy(path: Optional[Union[str, Path]] = None) -> Policy:
    """
    Load a validated policy from YAML, then apply environment overrides

    The YAML file holds the settings under a top-level "policy" key. When no
    path is given, BACKOFF_CONFIG_FILE is used. Missing or unreadable files
    fall back to the defaults.
    """
    load_dotenv(find_dotenv(usecwd=True))

    if path is None:
        path = os.getenv(CONFIG_FILE_ENV)

    policy = Policy()
    if path:
        policy_file = Path(path)
        if policy_file.exists():
            try:
                with open(policy_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ConfigurationError(f"Backoff policy file {policy_file} must hold a mapping")
                policy = policy_from_dict(data.get("policy") or {})
                logger.info(f"Loaded backoff policy from {policy_file}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error loading backoff policy from {policy_file}: {e}")
        else:
            logger.warning(f"Backoff policy file not found: {policy_file}")

    policy = policy_from_env(base=policy)
    validate_policy(policy)

    return policy
