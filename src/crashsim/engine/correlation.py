"""Correlated normal vectors for an equicorrelated asset universe.

Every asset shares one variance and every pair shares one covariance, so
the Cholesky factor has a closed form:

    L[0][0] = sqrt(variance)
    L[i][0] = sqrt(covariance)               i >= 1
    L[i][i] = sqrt(variance - covariance)    i >= 1

Covariance above variance would make the diagonal term imaginary; it is
clamped to zero instead of raising.
"""

import logging
import math

import numpy as np

from . import BASIS_POINTS_SQ, PERCENT, SHOCK_MEAN, VOLATILITY_VARIANCE_RATIO
from .parameters import SimulationParameters
from .rng import RandomEngine

logger = logging.getLogger(__name__)


def cholesky_factor(n: int, variance: float, covariance: float) -> np.ndarray:
    """Closed-form lower-triangular factor of the n x n equicorrelated matrix."""
    factor = np.zeros((n, n))
    factor[0, 0] = math.sqrt(max(0.0, variance))
    off_diagonal = math.sqrt(max(0.0, covariance))
    diagonal = math.sqrt(max(0.0, variance - covariance))
    for i in range(1, n):
        factor[i, 0] = off_diagonal
        factor[i, i] = diagonal
    return factor


def generate_correlated(
    n: int,
    mean: float,
    variance: float,
    covariance: float,
    engine: RandomEngine,
) -> np.ndarray:
    """Draw ``mean + L @ Z`` with Z a vector of n standard normals from ``engine``."""
    if covariance > variance:
        logger.debug(
            "Covariance %.6g exceeds variance %.6g, clamping idiosyncratic term to 0",
            covariance, variance,
        )
    factor = cholesky_factor(n, variance, covariance)
    z = engine.next_normals(n)
    return mean + factor @ z


def generate_trends(params: SimulationParameters, engine: RandomEngine) -> np.ndarray:
    """Zero-mean annual drift per asset."""
    return generate_correlated(
        params.n_assets, 0.0, params.trend_variance, params.trend_covariance, engine
    )


def generate_volatilities(params: SimulationParameters, engine: RandomEngine) -> np.ndarray:
    """Annual volatility per asset, centred on the base level and forced positive."""
    level = params.volatility / PERCENT
    volatilities = generate_correlated(
        params.n_assets,
        level,
        level**2 * VOLATILITY_VARIANCE_RATIO,
        params.volatility_covariance / BASIS_POINTS_SQ,
        engine,
    )
    return np.abs(volatilities)


def generate_shocks(params: SimulationParameters, engine: RandomEngine) -> np.ndarray:
    """Crash magnitude per asset, biased negative."""
    return generate_correlated(
        params.n_assets,
        SHOCK_MEAN,
        params.extreme_event_variance / BASIS_POINTS_SQ,
        params.extreme_event_covariance / BASIS_POINTS_SQ,
        engine,
    )
