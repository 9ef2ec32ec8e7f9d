"""CSV ingestion and synthetic generation of sensor readings."""

from __future__ import annotations

import csv
import logging
import math
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.records import SensorReading, SensorType, parse_sensor_type, type_to_string
from settings import UNKNOWN_TYPE_DEFAULT, UNKNOWN_TYPE_SKIP, get_settings

logger = logging.getLogger(__name__)

CSV_HEADER = ("sensor_id", "type", "value", "timestamp")
TIMESTAMP_SPREAD_MS = 3_600_000

VALUE_RANGES: Dict[SensorType, Tuple[float, float]] = {
    SensorType.TEMPERATURE: (0.0, 100.0),
    SensorType.PRESSURE: (0.0, 1000.0),
    SensorType.DEPTH: (0.0, 5000.0),
    SensorType.SONAR: (0.0, 10000.0),
    SensorType.ACCELEROMETER: (-10.0, 10.0),
    SensorType.GYROSCOPE: (-180.0, 180.0),
}


class IngestionError(Exception):
    """Raised when a readings file cannot be read or written."""


@dataclass(frozen=True)
class RowError:
    """Details about a line that was skipped while reading a CSV file."""

    row_number: int
    reason: str


@dataclass
class IngestionResult:
    readings: List[SensorReading] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)


class _RowRejected(Exception):
    def __init__(self, reason: str, invalid_value: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.invalid_value = invalid_value


def _split_line(text: str) -> List[str]:
    """Split one physical line; an unbalanced quote only affects that line."""
    try:
        return next(csv.reader([text]), [])
    except csv.Error as exc:
        raise _RowRejected("malformed line", invalid_value=text) from exc


def _current_timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


class DataIngester:
    """Reads, writes and simulates sensor readings.

    The random generator is injected so that simulated data can be reproduced
    from a seed.
    """

    def __init__(
        self,
        unknown_type_policy: str = UNKNOWN_TYPE_DEFAULT,
        rng: Optional[random.Random] = None,
    ) -> None:
        if unknown_type_policy not in (UNKNOWN_TYPE_DEFAULT, UNKNOWN_TYPE_SKIP):
            raise ValueError(f"Unsupported unknown type policy: {unknown_type_policy!r}")
        self.unknown_type_policy = unknown_type_policy
        self.rng = rng or random.Random()

    def read_file(self, path: Path) -> IngestionResult:
        """Parse ``path`` into readings, collecting per-line errors.

        A first line containing ``sensor_id`` is treated as a header. Blank
        lines and ``#`` comments are ignored.
        """
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                return self._read_lines(handle, source=str(path))
        except (OSError, UnicodeDecodeError) as exc:
            raise IngestionError(f"Cannot open file: {path}") from exc

    def write_file(self, readings: Iterable[SensorReading], path: Path) -> None:
        try:
            with path.open("w", encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle, lineterminator="\n")
                writer.writerow(CSV_HEADER)
                for reading in readings:
                    writer.writerow(
                        (
                            reading.sensor_id,
                            type_to_string(reading.sensor_type),
                            reading.value,
                            reading.timestamp,
                        )
                    )
        except OSError as exc:
            raise IngestionError(f"Cannot write file: {path}") from exc

    def generate(
        self,
        count: int,
        sensor_ids: Sequence[str],
        sensor_types: Sequence[SensorType],
        base_timestamp: Optional[int] = None,
    ) -> List[SensorReading]:
        if not sensor_ids or not sensor_types:
            raise ValueError("Sensor IDs and types must not be empty.")

        base = _current_timestamp_ms() if base_timestamp is None else base_timestamp
        readings: List[SensorReading] = []
        for _ in range(count):
            sensor_id = self.rng.choice(sensor_ids)
            sensor_type = self.rng.choice(sensor_types)
            low, high = VALUE_RANGES[sensor_type]
            readings.append(
                SensorReading(
                    sensor_id=sensor_id,
                    sensor_type=sensor_type,
                    value=self.rng.uniform(low, high),
                    timestamp=base + self.rng.randint(0, TIMESTAMP_SPREAD_MS),
                )
            )
        return readings

    def _read_lines(self, lines: Iterable[str], source: str) -> IngestionResult:
        result = IngestionResult()
        for row_number, line in enumerate(lines, start=1):
            text = line.rstrip("\r\n")
            if row_number == 1 and "sensor_id" in text.lower():
                continue
            if not text.strip() or text.lstrip().startswith("#"):
                continue

            try:
                reading = self._parse_row(
                    _split_line(text), row_number=row_number, source=source
                )
            except _RowRejected as exc:
                result.errors.append(RowError(row_number=row_number, reason=exc.reason))
                logger.warning(
                    "Skipping row",
                    extra={
                        "source": source,
                        "row_number": row_number,
                        "reason": exc.reason,
                        "invalid_value": exc.invalid_value,
                    },
                )
                continue
            result.readings.append(reading)

        logger.info(
            "Loaded readings",
            extra={
                "source": source,
                "input_count": len(result.readings),
                "error_count": len(result.errors),
            },
        )
        return result

    def _parse_row(self, row: List[str], row_number: int, source: str) -> SensorReading:
        tokens = [token.strip() for token in row]
        if len(tokens) < 4:
            raise _RowRejected("expected at least 4 columns")

        sensor_id, type_raw, value_raw, timestamp_raw = tokens[:4]

        sensor_type = parse_sensor_type(type_raw)
        if sensor_type is None:
            if self.unknown_type_policy == UNKNOWN_TYPE_SKIP:
                raise _RowRejected("unknown sensor type", invalid_value=type_raw)
            logger.warning(
                "Unknown sensor type, defaulting to TEMPERATURE",
                extra={"source": source, "row_number": row_number, "invalid_value": type_raw},
            )
            sensor_type = SensorType.TEMPERATURE

        try:
            value = float(value_raw)
        except ValueError:
            raise _RowRejected("invalid numeric value", invalid_value=value_raw) from None
        if not math.isfinite(value):
            raise _RowRejected("invalid numeric value", invalid_value=value_raw)

        try:
            timestamp = int(timestamp_raw)
        except ValueError:
            raise _RowRejected("invalid timestamp", invalid_value=timestamp_raw) from None

        reading = SensorReading(
            sensor_id=sensor_id, sensor_type=sensor_type, value=value, timestamp=timestamp
        )
        if not reading.is_valid():
            raise _RowRejected("invalid reading")
        return reading


def build_default_ingester(seed: Optional[int] = None) -> DataIngester:
    """Factory that wires an ingester from the environment settings."""
    settings = get_settings()
    effective_seed = settings.generator_seed if seed is None else seed
    return DataIngester(
        unknown_type_policy=settings.unknown_type_policy,
        rng=random.Random(effective_seed),
    )
