"""Pytest configuration and shared fixtures."""

import pytest

from crashsim.engine import ObservationFrequency
from crashsim.engine.parameters import SimulationParameters


@pytest.fixture
def small_params():
    """Three runs of three daily-sampled assets, crash likely."""
    return SimulationParameters(
        random_seed=7,
        n_simulations=3,
        n_observations=200,
        n_assets=3,
        base_price=100.0,
        trend_variance=0.04,
        trend_covariance=0.01,
        volatility=20.0,
        volatility_covariance=1.0,
        extreme_event_probability=0.5,
        extreme_event_variance=500.0,
        extreme_event_covariance=450.0,
        extreme_event_duration=20,
        observation_frequency=ObservationFrequency.DAILY,
    )


@pytest.fixture
def flat_params():
    """Degenerate deterministic case: no trend, no volatility, no crash."""
    return SimulationParameters(
        random_seed=42,
        n_simulations=1,
        n_observations=10,
        n_assets=1,
        base_price=100.0,
        trend_variance=0.0,
        trend_covariance=0.0,
        volatility=0.0,
        volatility_covariance=0.0,
        extreme_event_probability=0.0,
        extreme_event_duration=1,
    )
