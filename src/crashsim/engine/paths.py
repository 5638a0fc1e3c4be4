"""Geometric Brownian motion price paths with an optional crash window.

Per step and asset:
  logReturn = (mu - sigma^2/2)*dt + sigma*sqrt(dt)*Z
  logReturn += shock * exp(-3 * progress) * dt     inside the event window
  logPrice  = max(logPrice + logReturn, ln 0.01)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from . import MIN_PRICE, SHOCK_DECAY_RATE
from .correlation import generate_shocks
from .parameters import SimulationParameters
from .rng import RandomEngine

logger = logging.getLogger(__name__)

LOG_MIN_PRICE = math.log(MIN_PRICE)


@dataclass
class ExtremeEvent:
    """A crash shared by all assets of one run."""

    start: int
    duration: int
    shocks: np.ndarray  # one per asset

    def profile(self, n_observations: int) -> np.ndarray:
        """Decay multiplier per step index; zero outside [start, start+duration)."""
        profile = np.zeros(n_observations)
        steps = np.arange(self.start, min(self.start + self.duration, n_observations))
        progress = (steps - self.start) / self.duration
        profile[steps] = np.exp(-SHOCK_DECAY_RATE * progress)
        # Step 0 is the initial price and never receives a return.
        profile[0] = 0.0
        return profile


@dataclass
class PricePaths:
    prices: np.ndarray  # (assets, observations)
    log_prices: np.ndarray  # (assets, observations)
    event: ExtremeEvent | None


def draw_extreme_event(
    params: SimulationParameters, engine: RandomEngine
) -> ExtremeEvent | None:
    """Decide once per run whether a crash happens, and where."""
    if engine.next_uniform() >= params.extreme_event_probability:
        return None

    span = params.n_observations - params.extreme_event_duration
    start = min(math.floor(engine.next_uniform() * span), span - 1)
    shocks = generate_shocks(params, engine)
    logger.debug("Extreme event at step %d for %d steps", start, params.extreme_event_duration)
    return ExtremeEvent(start=start, duration=params.extreme_event_duration, shocks=shocks)


def integrate_log_path(initial_price: float, log_returns: np.ndarray) -> np.ndarray:
    """Accumulate log returns from ln(initial_price), flooring at ln(MIN_PRICE)."""
    start = math.log(initial_price)
    log_path = np.cumsum(np.concatenate(([start], log_returns)))
    if log_path[1:].size and log_path[1:].min() < LOG_MIN_PRICE:
        # The floor makes the recursion path-dependent.
        log_path = np.empty(len(log_returns) + 1)
        log_path[0] = level = start
        for i, r in enumerate(log_returns.tolist(), start=1):
            level = max(level + r, LOG_MIN_PRICE)
            log_path[i] = level
    return log_path


def simulate_asset_path(
    initial_price: float,
    trend: float,
    volatility: float,
    normals: np.ndarray,
    dt: float,
    shock: float = 0.0,
    shock_profile: np.ndarray | None = None,
) -> np.ndarray:
    """Log-price path for one asset; ``normals`` holds one draw per step."""
    drift = (trend - 0.5 * volatility**2) * dt
    diffusion = volatility * (math.sqrt(dt) * normals)
    log_returns = drift + diffusion
    if shock_profile is not None:
        log_returns = log_returns + shock * shock_profile[1:] * dt
    return integrate_log_path(initial_price, log_returns)


def simulate_price_paths(
    params: SimulationParameters,
    trends: np.ndarray,
    volatilities: np.ndarray,
    event: ExtremeEvent | None,
    engine: RandomEngine,
) -> PricePaths:
    """Integrate one full-resolution path per asset, in asset order."""
    n_obs = params.n_observations
    dt = params.dt
    profile = event.profile(n_obs) if event is not None else None

    log_prices = np.empty((params.n_assets, n_obs))
    for asset in range(params.n_assets):
        initial_price = max(params.base_price * (0.5 + engine.next_uniform()), MIN_PRICE)
        normals = engine.next_normals(n_obs - 1)
        log_prices[asset] = simulate_asset_path(
            initial_price,
            float(trends[asset]),
            float(volatilities[asset]),
            normals,
            dt,
            shock=float(event.shocks[asset]) if event is not None else 0.0,
            shock_profile=profile,
        )

    prices = np.maximum(np.exp(log_prices), MIN_PRICE)
    return PricePaths(prices=prices, log_prices=log_prices, event=event)
