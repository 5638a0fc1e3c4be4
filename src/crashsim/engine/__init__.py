"""Correlated jump-diffusion price path engine.

Components (leaf-first):
- rng: seeded uniform/normal generators (PCG64, legacy LCG)
- correlation: equicorrelated multivariate normal vectors
- paths: GBM integration with an optional decaying crash shock
- metrics: realized volatility and annualised effective trend
- downsample: bounded-length series for charting
- orchestrator: drives N runs into a SimulationResult
"""

from enum import Enum


class ObservationFrequency(str, Enum):
    """What one observation (one integration step) represents."""

    MINUTE = "minute"
    HOURLY = "hourly"
    DAILY = "daily"

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]

    @property
    def dt(self) -> float:
        return 1.0 / PERIODS_PER_YEAR[self]


class RandomAlgorithm(str, Enum):
    PCG64 = "pcg64"
    LCG = "lcg"


class ExecutionMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARTITIONED = "partitioned"


PERIODS_PER_YEAR = {
    ObservationFrequency.MINUTE: 365 * 24 * 60,
    ObservationFrequency.HOURLY: 365 * 24,
    ObservationFrequency.DAILY: 252,  # trading days
}

MIN_PRICE = 0.01
MAX_ASSETS = 20
DEFAULT_DOWNSAMPLE_TARGET = 500

# Unit conversions for dashboard inputs
PERCENT = 100.0
BASIS_POINTS_SQ = 10_000.0
VOLATILITY_VARIANCE_RATIO = 0.1  # variance of vol draws, relative to vol level squared
SHOCK_MEAN = -0.1  # crash bias
SHOCK_DECAY_RATE = 3.0


__all__ = [
    "ObservationFrequency",
    "RandomAlgorithm",
    "ExecutionMode",
    "PERIODS_PER_YEAR",
    "MIN_PRICE",
    "MAX_ASSETS",
    "DEFAULT_DOWNSAMPLE_TARGET",
]
