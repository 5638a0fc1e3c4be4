"""Simulation API endpoints."""

import logging

from fastapi import APIRouter, Depends

from crashsim.config import Settings
from crashsim.engine.orchestrator import run
from crashsim.engine.parameters import SimulationParameters
from crashsim.errors import ConfigurationError
from crashsim.web.dependencies import get_settings
from crashsim.web.schemas import (
    ApiResponse,
    ErrorResponse,
    SimulationResponse,
    SimulationRunSchema,
    SimulationSummarySchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulate", tags=["simulation"])


@router.post(
    "",
    response_model=ApiResponse[SimulationResponse],
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def simulate(
    parameters: SimulationParameters,
    settings: Settings = Depends(get_settings),
):
    """Run a Monte Carlo simulation with the supplied parameters.

    CPU-bound, so declared sync and served from the threadpool.
    """
    if parameters.total_steps > settings.max_total_steps:
        raise ConfigurationError(
            "nSimulations",
            f"nSimulations x nObservations x nAssets = {parameters.total_steps} "
            f"exceeds the limit of {settings.max_total_steps}",
        )

    logger.info(
        "Simulating %d runs (%d assets, %d observations, seed %d)",
        parameters.n_simulations, parameters.n_assets,
        parameters.n_observations, parameters.random_seed,
    )
    result = run(
        parameters,
        downsample_target=settings.downsample_target,
        max_workers=settings.max_workers,
    )

    return ApiResponse(
        data=SimulationResponse(
            simulations=[SimulationRunSchema.model_validate(r.to_dict()) for r in result.runs],
            params=result.parameters,
            summary=SimulationSummarySchema.model_validate(result.summary()),
        )
    )


@router.get("/defaults", response_model=ApiResponse[SimulationParameters])
def get_defaults():
    """Get the default parameter set."""
    return ApiResponse(data=SimulationParameters())
