"""Typed, frozen simulation parameters.

Field aliases match the dashboard's camelCase JSON; snake_case names are
accepted as well.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from crashsim.errors import ConfigurationError

from . import MAX_ASSETS, ExecutionMode, ObservationFrequency, RandomAlgorithm

logger = logging.getLogger(__name__)

MAX_SIMULATIONS = 1000


class SimulationParameters(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
    )

    # General
    random_seed: int = Field(2151, ge=0, alias="randomSeed")
    n_simulations: int = Field(100, ge=1, le=MAX_SIMULATIONS, alias="nSimulations")
    n_observations: int = Field(60 * 24 * 7 * 26, ge=2, alias="nObservations")
    base_price: float = Field(2000.0, gt=0, alias="basePrice")
    n_assets: int = Field(
        5,
        ge=1,
        le=MAX_ASSETS,
        alias="nAssets",
        validation_alias=AliasChoices("nAssets", "n_assets"),
    )
    transaction_fee: float = Field(0.0006, ge=0, le=1, alias="transactionFee")

    # Trend & volatility
    trend_variance: float = Field(0.012**2, ge=0, alias="variance")
    trend_covariance: float = Field(0.007**2, ge=0, alias="covariance")
    volatility: float = Field(3.0, ge=0, description="Base volatility in percent")
    volatility_covariance: float = Field(1.75, ge=0, alias="volatilityCovariance")

    # Extreme events (variance/covariance in basis points squared)
    extreme_event_probability: float = Field(0.05, ge=0, le=1, alias="extremeEventProbability")
    extreme_event_variance: float = Field(500.0, ge=0, alias="extremeEventVariance")
    extreme_event_covariance: float = Field(450.0, ge=0, alias="extremeEventCovariance")
    extreme_event_duration: int = Field(
        60 * 24, ge=1, alias="extremeEventDuration", validate_default=True
    )

    # Engine
    observation_frequency: ObservationFrequency = Field(
        ObservationFrequency.MINUTE, alias="observationFrequency"
    )
    generator: RandomAlgorithm = RandomAlgorithm.PCG64
    execution_mode: ExecutionMode = Field(ExecutionMode.SEQUENTIAL, alias="executionMode")

    @model_validator(mode="before")
    @classmethod
    def _fold_currency_count(cls, data: Any) -> Any:
        """Accept the dashboard's ``nCurrencies`` key; an explicit asset count wins."""
        if isinstance(data, Mapping) and "nCurrencies" in data:
            data = dict(data)
            currencies = data.pop("nCurrencies")
            if "nAssets" not in data and "n_assets" not in data:
                data["nAssets"] = currencies
        return data

    @field_validator("extreme_event_duration")
    @classmethod
    def _duration_fits_observations(cls, value: int, info: ValidationInfo) -> int:
        n_observations = info.data.get("n_observations")
        if n_observations is not None and value >= n_observations:
            raise ValueError(
                f"must be smaller than nObservations ({n_observations}), got {value}"
            )
        return value

    @classmethod
    def build(cls, data: "Mapping[str, Any] | SimulationParameters") -> "SimulationParameters":
        """Validate ``data`` and raise ConfigurationError naming the first bad field.

        An existing instance is re-validated, so instances created with
        model_construct() cannot bypass the range checks.
        """
        if isinstance(data, SimulationParameters):
            data = data.model_dump()
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = field_label(error["loc"])
            logger.debug("Rejected parameters: %s", exc)
            raise ConfigurationError(field, error["msg"]) from exc

    @property
    def periods_per_year(self) -> int:
        return self.observation_frequency.periods_per_year

    @property
    def dt(self) -> float:
        return self.observation_frequency.dt

    @property
    def total_steps(self) -> int:
        return self.n_simulations * self.n_observations * self.n_assets

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def field_label(loc: tuple[int | str, ...]) -> str:
    """Map a pydantic error location to the field's camelCase alias."""
    if not loc:
        return "parameters"
    key = str(loc[0])
    field = SimulationParameters.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key
