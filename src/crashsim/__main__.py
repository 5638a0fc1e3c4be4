import json
import logging

import click
from pydantic.alias_generators import to_camel

from crashsim.config import Settings
from crashsim.engine import ExecutionMode, ObservationFrequency, RandomAlgorithm
from crashsim.errors import ConfigurationError, SimulationFailed
from crashsim.logging_config import setup_logging

logger = logging.getLogger(__name__)

# CLI option name -> parameter field name
_OVERRIDES = {
    "seed": "random_seed",
    "runs": "n_simulations",
    "observations": "n_observations",
    "assets": "n_assets",
    "base_price": "base_price",
    "event_probability": "extreme_event_probability",
    "event_duration": "extreme_event_duration",
    "frequency": "observation_frequency",
    "generator": "generator",
    "mode": "execution_mode",
}


def _apply_overrides(data: dict, overrides: dict, model) -> None:
    """Write CLI options into ``data`` under their alias, replacing any
    spelling of the same field the params file used."""
    for option, name in _OVERRIDES.items():
        value = overrides.get(option)
        if value is None:
            continue
        alias = model.model_fields[name].alias or name
        data.pop(name, None)
        data[alias] = value


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """crashsim - Correlated price paths with extreme-event injection"""
    settings = Settings()
    setup_logging(settings.log_dir, settings.log_file)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--params", "-p", "params_file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="JSON file with simulation parameters (camelCase keys)")
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), default=None,
              help="Write the result JSON here (default: stdout)")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option("--runs", type=int, default=None, help="Number of simulation runs")
@click.option("--observations", type=int, default=None, help="Observations per run")
@click.option("--assets", type=int, default=None, help="Number of assets")
@click.option("--base-price", type=float, default=None, help="Base price")
@click.option("--event-probability", type=float, default=None,
              help="Extreme event probability per run")
@click.option("--event-duration", type=int, default=None, help="Extreme event duration in steps")
@click.option("--frequency", type=click.Choice([f.value for f in ObservationFrequency]),
              default=None, help="What one observation represents")
@click.option("--generator", type=click.Choice([a.value for a in RandomAlgorithm]),
              default=None, help="Random engine")
@click.option("--mode", type=click.Choice([m.value for m in ExecutionMode]), default=None,
              help="sequential (reference) or partitioned (parallel, different numbers)")
@click.option("--workers", type=int, default=None, help="Worker processes for partitioned mode")
def run(params_file: str | None, output_file: str | None, workers: int | None, **overrides):
    """Run a simulation and emit the result as JSON."""
    from crashsim.engine.orchestrator import run as run_simulation
    from crashsim.engine.parameters import SimulationParameters

    settings = Settings()

    data = {}
    if params_file:
        with open(params_file, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise click.BadParameter(f"not valid JSON: {e}", param_hint="--params") from e
        if not isinstance(data, dict):
            raise click.BadParameter("must contain a JSON object", param_hint="--params")
    _apply_overrides(data, overrides, SimulationParameters)

    try:
        parameters = SimulationParameters.build(data)
    except ConfigurationError as e:
        raise click.BadParameter(e.message, param_hint=e.field) from e

    def _progress(completed: int, total: int):
        logger.debug("Completed run %d/%d", completed, total)

    try:
        result = run_simulation(
            parameters,
            downsample_target=settings.downsample_target,
            max_workers=workers or settings.max_workers,
            progress=_progress,
        )
    except SimulationFailed as e:
        raise click.ClickException(str(e)) from e

    summary = result.summary()
    payload = {**result.to_dict(), "summary": {to_camel(k): v for k, v in summary.items()}}
    text = json.dumps(payload, allow_nan=False)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Wrote {summary['n_runs']} runs to {output_file}")
        click.echo(f"  extreme events: {summary['extreme_events']} ({summary['extreme_event_rate']:.1%})")
        click.echo(f"  realized volatility (mean): {summary['realized_volatility_mean']:.4f}%")
    else:
        click.echo(text)


@cli.command()
def defaults():
    """Print the default parameter set as JSON."""
    from crashsim.engine.parameters import SimulationParameters

    click.echo(json.dumps(SimulationParameters().to_dict(), indent=2))


if __name__ == "__main__":
    cli()
