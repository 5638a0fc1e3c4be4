"""Immutable run and result records."""

import math
from dataclasses import dataclass
from typing import Any, TypedDict

import numpy as np

from .parameters import SimulationParameters


class ResultSummary(TypedDict):
    """Aggregate statistics across all runs of a result."""
    n_runs: int
    extreme_events: int
    extreme_event_rate: float
    realized_volatility_mean: float
    realized_volatility_min: float
    realized_volatility_max: float
    effective_trend_mean: list[float | None]  # per asset, non-finite runs excluded


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class SimulationRun:
    prices: tuple[tuple[float, ...], ...]  # asset-major, downsampled
    trends: tuple[float, ...]
    volatilities: tuple[float, ...]
    extreme_event: bool
    extreme_event_index: int | None
    realized_volatility: float  # percent, first asset
    effective_trends: tuple[float, ...]

    @classmethod
    def from_arrays(
        cls,
        prices: np.ndarray,
        trends: np.ndarray,
        volatilities: np.ndarray,
        extreme_event_index: int | None,
        realized_volatility: float,
        effective_trends: np.ndarray,
    ) -> "SimulationRun":
        return cls(
            prices=tuple(tuple(row) for row in np.atleast_2d(prices).tolist()),
            trends=tuple(np.asarray(trends, dtype=float).tolist()),
            volatilities=tuple(np.asarray(volatilities, dtype=float).tolist()),
            extreme_event=extreme_event_index is not None,
            extreme_event_index=extreme_event_index,
            realized_volatility=float(realized_volatility),
            effective_trends=tuple(np.asarray(effective_trends, dtype=float).tolist()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain nested structure; non-finite metrics become None."""
        return {
            "prices": [list(row) for row in self.prices],
            "trends": list(self.trends),
            "volatilities": list(self.volatilities),
            "extremeEvent": self.extreme_event,
            "extremeEventIndex": self.extreme_event_index,
            "realizedVolatility": _finite_or_none(self.realized_volatility),
            "effectiveTrends": [_finite_or_none(t) for t in self.effective_trends],
        }


@dataclass(frozen=True)
class SimulationResult:
    parameters: SimulationParameters
    runs: tuple[SimulationRun, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "simulations": [run.to_dict() for run in self.runs],
            "params": self.parameters.to_dict(),
        }

    def summary(self) -> ResultSummary:
        realized = np.array([run.realized_volatility for run in self.runs], dtype=float)
        trends = np.array([run.effective_trends for run in self.runs], dtype=float)
        events = sum(1 for run in self.runs if run.extreme_event)

        trend_means: list[float | None] = []
        for column in trends.T:
            finite = column[np.isfinite(column)]
            trend_means.append(round(float(finite.mean()), 6) if finite.size else None)

        return ResultSummary(
            n_runs=len(self.runs),
            extreme_events=events,
            extreme_event_rate=round(events / len(self.runs), 4) if self.runs else 0.0,
            realized_volatility_mean=round(float(realized.mean()), 4) if realized.size else 0.0,
            realized_volatility_min=round(float(realized.min()), 4) if realized.size else 0.0,
            realized_volatility_max=round(float(realized.max()), 4) if realized.size else 0.0,
            effective_trend_mean=trend_means,
        )
