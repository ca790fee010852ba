"""Tests for service construction and the retry decorator"""
import threading

import pytest

from backoff_service import service as service_module
from backoff_service.algorithm import Algorithm, BackoffServiceAPI
from backoff_service.config import policy_from_env
from backoff_service.errors import ConfigurationError, RetryExhaustedError
from backoff_service.exponential import ExponentialBackoff
from backoff_service.policy import Policy
from backoff_service.service import new, retry


class TestNew:
    """Test building services from policies"""

    def test_default_policy(self):
        service = new()

        assert isinstance(service, ExponentialBackoff)
        assert isinstance(service, BackoffServiceAPI)

    def test_valid_randomization_factor(self):
        service = new(Policy(randomization_factor=0.5))

        assert service.randomization_factor == 0.5

    def test_invalid_randomization_factor(self):
        """Test that construction fails before any service is built"""
        with pytest.raises(ConfigurationError):
            new(Policy(randomization_factor=1.5))

    def test_nan_factor_from_environment(self):
        """Test that a NaN factor read from the environment never reaches an engine"""
        policy = policy_from_env({"BACKOFF_RANDOMIZATION_FACTOR": "nan"})

        with pytest.raises(ConfigurationError):
            new(policy)

    def test_invalid_algorithm(self):
        with pytest.raises(ConfigurationError):
            new(Policy(algorithm=-1))

    def test_algorithm_without_implementation(self, monkeypatch):
        """Test that a known algorithm with no registered engine is rejected"""
        monkeypatch.setattr(service_module, "ALGORITHMS", {})

        with pytest.raises(ConfigurationError):
            new(Policy(algorithm=Algorithm.EXPONENTIAL))

    def test_services_are_independent(self):
        first = new(Policy(start_interval=1.0))
        second = new(Policy(start_interval=2.0))

        assert first is not second
        assert first.initial_interval == 1.0
        assert second.initial_interval == 2.0


class TestRetryDecorator:
    """Test decorating functions with backoff"""

    def test_returns_result(self):
        @retry(Policy(start_interval=0.001))
        def add(a, b):
            return a + b

        assert add(2, b=3) == 5
        assert add.__name__ == "add"

    def test_retries_until_success(self):
        calls = []

        @retry(Policy(start_interval=0.001, max_interval=1.0))
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("unreachable")
            return "ok"

        assert flaky() == "ok"
        assert len(calls) == 3

    def test_exhaustion(self):
        @retry(Policy(start_interval=0.001, max_retry_count=2))
        def broken():
            raise ConnectionError("unreachable")

        with pytest.raises(RetryExhaustedError) as exc_info:
            broken()

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_invalid_policy_rejected_at_decoration(self):
        with pytest.raises(ConfigurationError):
            retry(Policy(randomization_factor=3.0))

    def test_concurrent_calls(self):
        """Test that concurrent calls each run their own cycle"""
        results = []
        lock = threading.Lock()
        attempts = {}

        @retry(Policy(start_interval=0.001, max_interval=1.0))
        def work(key):
            with lock:
                attempts[key] = attempts.get(key, 0) + 1
                if attempts[key] < 2:
                    raise RuntimeError("first attempt fails")
            return key

        threads = [threading.Thread(target=lambda k=k: results.append(work(k))) for k in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == [0, 1, 2, 3, 4]
        assert all(count == 2 for count in attempts.values())
