"""Exception hierarchy for the simulation engine."""


class SimulationError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(SimulationError, ValueError):
    """A parameter value is invalid. Raised before any simulation work starts."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class SimulationCancelled(SimulationError):
    """The caller requested cancellation at a run boundary."""

    def __init__(self, completed: int, total: int):
        self.completed = completed
        self.total = total
        super().__init__(f"Simulation cancelled after {completed}/{total} runs")


class SimulationFailed(SimulationError):
    """Computation failed; no partial result is returned."""
