from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

import typer

from models.records import SensorReading, SensorStatistics, SensorType, type_to_string


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]], indent: str = "  ") -> None:
    for key, value in pairs:
        typer.echo(f"{indent}{key}: {value}")


def render_statistics(stats: SensorStatistics, label: str = "Statistics") -> None:
    typer.echo()
    echo_heading(f"{label}:")
    echo_key_values(
        [
            ("Count", stats.count),
            ("Min", f"{stats.min_value:.2f}"),
            ("Max", f"{stats.max_value:.2f}"),
            ("Mean", f"{stats.mean_value:.2f}"),
            ("Median", f"{stats.median_value:.2f}"),
        ]
    )


def render_grouped_statistics(
    heading: str, groups: Mapping[Any, SensorStatistics]
) -> None:
    if not groups:
        return
    typer.echo()
    echo_heading(heading)
    for key, stats in groups.items():
        label = type_to_string(key) if isinstance(key, SensorType) else str(key)
        render_statistics(stats, label=label)


def format_reading(reading: SensorReading) -> str:
    return (
        f"[{reading.sensor_id}] {type_to_string(reading.sensor_type):<15}"
        f" Value: {reading.value:<10.2f} Timestamp: {reading.timestamp}"
    )


def render_preview(readings: Sequence[SensorReading], limit: int) -> None:
    typer.echo()
    echo_heading(f"Sample processed readings (first {limit}):")
    for reading in readings[:limit]:
        typer.echo(format_reading(reading))
    if len(readings) > limit:
        typer.echo(f"... ({len(readings) - limit} more readings)")
