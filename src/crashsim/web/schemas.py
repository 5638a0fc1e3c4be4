"""Pydantic response schemas for the crashsim API."""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from crashsim.engine.parameters import SimulationParameters

T = TypeVar("T")


# --- Base schemas ---


class Meta(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: Meta = Field(default_factory=Meta)


class ErrorResponse(BaseModel):
    error: dict[str, Any] = Field(
        description="Error details with code, message, and optional detail"
    )


class HealthResponse(BaseModel):
    status: str
    version: str


# --- Simulation schemas ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SimulationRunSchema(_CamelModel):
    prices: list[list[float]] = Field(description="Asset-major downsampled prices")
    trends: list[float]
    volatilities: list[float]
    extreme_event: bool
    extreme_event_index: int | None = Field(None, description="Start step of the crash window")
    realized_volatility: float | None = Field(description="First asset, annualised, percent")
    effective_trends: list[float | None] = Field(description="Annualised compound return per asset")


class SimulationSummarySchema(_CamelModel):
    n_runs: int
    extreme_events: int
    extreme_event_rate: float
    realized_volatility_mean: float
    realized_volatility_min: float
    realized_volatility_max: float
    effective_trend_mean: list[float | None]


class SimulationResponse(BaseModel):
    simulations: list[SimulationRunSchema]
    params: SimulationParameters
    summary: SimulationSummarySchema
