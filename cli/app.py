from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import render_grouped_statistics, render_preview, render_statistics
from logging_config import configure_logging
from models.records import SensorReading
from services.ingestion import DataIngester, IngestionError, build_default_ingester
from services.pipeline import ProcessingPipeline, build_default_pipeline


@dataclass
class CLIState:
    config: CLIConfig
    ingester: DataIngester
    pipeline: ProcessingPipeline


app = typer.Typer(
    help="Filter, clean and summarize timestamped sensor readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _ingester_for(state: CLIState, seed: Optional[int]) -> DataIngester:
    if seed is None:
        return state.ingester
    return DataIngester(
        unknown_type_policy=state.ingester.unknown_type_policy,
        rng=random.Random(seed),
    )


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
    preview_limit: Optional[int] = typer.Option(
        None,
        "--preview-limit",
        min=1,
        help="Readings shown when no output file is given (defaults to SENSOR_PREVIEW_LIMIT env or 10).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level, force=log_level is not None)
    config = load_config(preview_limit=preview_limit)
    ctx.obj = CLIState(
        config=config,
        ingester=build_default_ingester(seed=config.seed),
        pipeline=build_default_pipeline(),
    )


@app.command("process")
def process_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        dir_okay=False,
        help="Read sensor data from a CSV file.",
    ),
    generate: Optional[int] = typer.Option(
        None,
        "--generate",
        "-g",
        min=1,
        help="Generate this many simulated sensor readings.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for simulated data."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="Write processed readings to this CSV file.",
    ),
    stats: bool = typer.Option(
        False, "--stats", "-s", help="Show overall and grouped statistics."
    ),
    normalize: bool = typer.Option(
        False, "--normalize", help="Rescale processed values onto [0, 1]."
    ),
) -> None:
    """Clean readings and report statistics."""
    state = _get_state(ctx)
    if (file is None) == (generate is None):
        _fail("Specify exactly one of --file or --generate.")

    readings: List[SensorReading]
    if file is not None:
        typer.echo(f"Reading sensor data from: {file}")
        try:
            loaded = state.ingester.read_file(file)
        except IngestionError as exc:
            _fail(str(exc))
        readings = loaded.readings
        typer.echo(f"Loaded {len(readings)} sensor readings")
        if loaded.errors:
            typer.echo(f"Skipped {len(loaded.errors)} rows")
    else:
        typer.echo(f"Generating {generate} simulated sensor readings...")
        readings = _ingester_for(state, seed).generate(
            generate, state.config.sensor_ids, state.config.sensor_types
        )
        typer.echo(f"Generated {len(readings)} sensor readings")

    if not readings:
        _fail("No sensor readings to process.")

    typer.echo()
    typer.echo("Processing sensor data...")
    result = state.pipeline.run(readings, normalize=normalize)
    typer.echo(
        f"Processed {result.retained_count} readings "
        f"(removed {result.removed_count} outliers/invalid)"
    )

    if stats:
        render_statistics(result.statistics, label="Overall Statistics")
        render_grouped_statistics("Statistics by Sensor Type:", result.statistics_by_type)
        render_grouped_statistics("Statistics by Sensor ID:", result.statistics_by_sensor_id)

    if output is not None:
        try:
            state.ingester.write_file(result.readings, output)
        except IngestionError as exc:
            _fail(str(exc))
        typer.echo()
        typer.secho(f"Processed data written to: {output}", fg=typer.colors.GREEN)
    else:
        render_preview(result.readings, state.config.preview_limit)


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    count: int = typer.Argument(..., min=1, help="Number of readings to generate."),
    output: Path = typer.Option(
        ..., "--output", "-o", dir_okay=False, help="Destination CSV file."
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for simulated data."
    ),
) -> None:
    """Write simulated readings to a CSV file without processing them."""
    state = _get_state(ctx)
    readings = _ingester_for(state, seed).generate(
        count, state.config.sensor_ids, state.config.sensor_types
    )
    try:
        state.ingester.write_file(readings, output)
    except IngestionError as exc:
        _fail(str(exc))
    typer.secho(f"Wrote {len(readings)} readings to {output}", fg=typer.colors.GREEN)
