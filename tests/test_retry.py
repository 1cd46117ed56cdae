"""
Tests for the reconnection policy helpers.
"""

import pytest

from live_client.components.resilience.retry import (
    RetryConfig,
    calculate_delay,
    create_reconnect_config,
    should_retry,
)
from live_shared.config.settings import Settings


class TestRetryConfig:
    def test_defaults_are_fixed_delay(self):
        config = RetryConfig()

        assert config.max_attempts == 5
        assert [calculate_delay(i, config) for i in range(5)] == [1.0] * 5

    def test_delay_does_not_grow(self):
        config = RetryConfig(delay=2.5, max_attempts=10)

        assert {calculate_delay(i, config) for i in range(10)} == {2.5}

    def test_only_fixed_delay_knobs(self):
        with pytest.raises(TypeError):
            RetryConfig(backoff_base=2.0)
        with pytest.raises(TypeError):
            RetryConfig(jitter_factor=0.5)

    @pytest.mark.parametrize("kwargs", [{"delay": -1}, {"max_attempts": -1}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)

    def test_zero_delay_and_attempts_are_valid(self):
        config = RetryConfig(delay=0.0, max_attempts=0)

        assert calculate_delay(0, config) == 0.0
        assert not should_retry(0, config.max_attempts)


class TestShouldRetry:
    def test_bounded(self):
        assert should_retry(0, 5)
        assert should_retry(4, 5)
        assert not should_retry(5, 5)
        assert not should_retry(0, 0)


class TestCreateReconnectConfig:
    def test_from_settings(self):
        config = create_reconnect_config(
            Settings(ws_reconnect_attempts=3, ws_reconnect_delay=2.5, _env_file=None)
        )

        assert config == RetryConfig(delay=2.5, max_attempts=3)
        assert calculate_delay(2, config) == 2.5

    def test_large_delay_is_kept(self):
        config = create_reconnect_config(Settings(ws_reconnect_delay=45.0, _env_file=None))

        assert calculate_delay(0, config) == 45.0
