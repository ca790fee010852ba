"""Algorithm selector and the capability every backoff engine exposes"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .policy import Policy

# A Function returns data and is retried while it raises.
Function = Callable[[], Any]
# An Action returns nothing and is retried while it raises.
Action = Callable[[], None]

# Returned by next_backoff() when the cycle must stop.
STOP = -1.0


class Algorithm(Enum):
    """Available backoff algorithms"""
    EXPONENTIAL = 0


class BackoffServiceAPI(ABC):
    """
    Interface of a backoff service.

    An instance holds the state of one retry cycle at a time and must not be
    used by concurrently running cycles.
    """

    @abstractmethod
    def setup(self, policy: "Policy") -> None:
        """Apply a policy on top of the algorithm defaults"""

    @abstractmethod
    def execute_function(self, op: Function) -> Any:
        """Run op until it returns, and return its output"""

    @abstractmethod
    def execute_action(self, op: Action) -> None:
        """Run op until it returns (fire and forget)"""

    @abstractmethod
    def next_backoff(self) -> float:
        """Seconds to wait before the next attempt, or STOP"""

    @abstractmethod
    def elapsed_time(self) -> float:
        """Seconds since the current cycle started"""

    @abstractmethod
    def reset_defaults(self) -> None:
        """Restore every tunable to the algorithm defaults"""

    @abstractmethod
    def reset(self) -> None:
        """Begin a new cycle"""
