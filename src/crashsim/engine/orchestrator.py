"""Monte Carlo run orchestrator.

Sequential mode threads one engine through every run: run k+1's first draw
is the draw right after run k's last. Partitioned mode gives each run its
own engine seeded from (seed, run index) so runs can execute on a process
pool; it is deterministic but produces different numbers from sequential.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any

from crashsim.errors import (
    ConfigurationError,
    SimulationCancelled,
    SimulationError,
    SimulationFailed,
)

from . import DEFAULT_DOWNSAMPLE_TARGET, PERCENT, ExecutionMode
from .correlation import generate_trends, generate_volatilities
from .downsample import downsample
from .metrics import effective_trends, realized_volatility
from .parameters import SimulationParameters
from .paths import draw_extreme_event, simulate_price_paths
from .results import SimulationResult, SimulationRun
from .rng import RandomEngine, create_engine, derive_run_seed

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# Failures that mean the computation itself broke down, as opposed to bad input
_COMPUTE_FAILURES = (MemoryError, FloatingPointError, OverflowError)


# ---------------------------------------------------------------------------
# Single run
# ---------------------------------------------------------------------------


def simulate_run(
    params: SimulationParameters,
    engine: RandomEngine,
    downsample_target: int = DEFAULT_DOWNSAMPLE_TARGET,
) -> SimulationRun:
    """Simulate one run, consuming draws from ``engine`` in the fixed order:
    trends, volatilities, event decision (+ start and shocks), then per asset
    the initial price and one normal per step.
    """
    trends = generate_trends(params, engine)
    volatilities = generate_volatilities(params, engine)
    event = draw_extreme_event(params, engine)
    paths = simulate_price_paths(params, trends, volatilities, event, engine)

    periods = params.periods_per_year
    realized = realized_volatility(paths.log_prices[0], periods) * PERCENT
    effective = effective_trends(paths.prices, periods)

    return SimulationRun.from_arrays(
        prices=downsample(paths.prices, downsample_target),
        trends=trends,
        volatilities=volatilities,
        extreme_event_index=event.start if event is not None else None,
        realized_volatility=realized,
        effective_trends=effective,
    )


def _simulate_partition(
    params: SimulationParameters, run_index: int, downsample_target: int
) -> tuple[int, SimulationRun]:
    """Picklable worker for ProcessPoolExecutor."""
    engine = create_engine(params.generator, derive_run_seed(params.random_seed, run_index))
    return run_index, simulate_run(params, engine, downsample_target)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run(
    parameters: "SimulationParameters | Mapping[str, Any]",
    *,
    downsample_target: int = DEFAULT_DOWNSAMPLE_TARGET,
    max_workers: int | None = None,
    progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> SimulationResult:
    """Run every simulation described by ``parameters``.

    Args:
        parameters: Parameter model or a camelCase/snake_case mapping.
        downsample_target: Maximum points per returned price series.
        max_workers: Process count for partitioned mode (ignored otherwise).
        progress: Called as progress(completed, total) after each run.
        cancel_event: Checked at run boundaries; when set, raises
            SimulationCancelled.

    Returns:
        SimulationResult with runs ordered by run index.

    Raises:
        ConfigurationError: Invalid parameters, before any run starts.
        SimulationCancelled: ``cancel_event`` was set.
        SimulationFailed: The computation broke down; no partial result.
    """
    params = SimulationParameters.build(parameters)
    if downsample_target < 1:
        raise ConfigurationError("downsampleTarget", f"must be >= 1, got {downsample_target}")

    logger.debug(
        "Simulating %d run(s) x %d asset(s) x %d observation(s) [%s, %s, %s]",
        params.n_simulations, params.n_assets, params.n_observations,
        params.observation_frequency.value, params.generator.value, params.execution_mode.value,
    )

    try:
        if params.execution_mode == ExecutionMode.PARTITIONED:
            runs = _run_partitioned(params, downsample_target, max_workers, progress, cancel_event)
        else:
            runs = _run_sequential(params, downsample_target, progress, cancel_event)
    except _COMPUTE_FAILURES as e:
        raise SimulationFailed(f"Simulation failed: {e!r}") from e

    return SimulationResult(parameters=params, runs=tuple(runs))


def _run_sequential(
    params: SimulationParameters,
    downsample_target: int,
    progress: ProgressCallback | None,
    cancel_event: threading.Event | None,
) -> list[SimulationRun]:
    engine = create_engine(params.generator, params.random_seed)
    total = params.n_simulations
    runs: list[SimulationRun] = []

    for run_index in range(total):
        if cancel_event is not None and cancel_event.is_set():
            raise SimulationCancelled(run_index, total)
        runs.append(simulate_run(params, engine, downsample_target))
        logger.debug("Run %d/%d complete", run_index + 1, total)
        if progress is not None:
            progress(run_index + 1, total)

    return runs


def _run_partitioned(
    params: SimulationParameters,
    downsample_target: int,
    max_workers: int | None,
    progress: ProgressCallback | None,
    cancel_event: threading.Event | None,
) -> list[SimulationRun]:
    total = params.n_simulations
    runs: list[SimulationRun | None] = [None] * total
    completed = 0
    if cancel_event is not None and cancel_event.is_set():
        raise SimulationCancelled(completed, total)

    logger.debug("Running %d partitioned simulations with %s workers", total, max_workers or "default")

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_simulate_partition, params, run_index, downsample_target): run_index
            for run_index in range(total)
        }
        try:
            for future in as_completed(futures):
                if cancel_event is not None and cancel_event.is_set():
                    raise SimulationCancelled(completed, total)
                run_index = futures[future]
                try:
                    _, runs[run_index] = future.result()
                except Exception as e:
                    raise SimulationFailed(f"Run {run_index} failed: {e!r}") from e
                completed += 1
                if progress is not None:
                    progress(completed, total)
        except SimulationError:
            for future in futures:
                future.cancel()
            raise

    return [r for r in runs if r is not None]
