"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SensorType(str, Enum):
    """Measurement categories a sensor can report."""

    TEMPERATURE = "TEMPERATURE"
    PRESSURE = "PRESSURE"
    DEPTH = "DEPTH"
    SONAR = "SONAR"
    ACCELEROMETER = "ACCELEROMETER"
    GYROSCOPE = "GYROSCOPE"


_TYPES_BY_NAME = {member.value: member for member in SensorType}


@dataclass(slots=True)
class SensorReading:
    """A single timestamped sensor observation."""

    sensor_id: str = ""
    sensor_type: SensorType = SensorType.TEMPERATURE
    value: float = 0.0
    timestamp: int = 0  # Unix milliseconds

    def is_valid(self) -> bool:
        return bool(self.sensor_id) and self.timestamp > 0


@dataclass
class SensorStatistics:
    """Descriptive statistics for a batch of sensor readings."""

    min_value: float = 0.0
    max_value: float = 0.0
    mean_value: float = 0.0
    median_value: float = 0.0
    count: int = 0


def type_to_string(sensor_type: Any) -> str:
    if isinstance(sensor_type, SensorType):
        return sensor_type.value
    return "UNKNOWN"


def parse_sensor_type(text: str) -> Optional[SensorType]:
    """Return the type named exactly by ``text``, or ``None`` if unrecognized."""
    return _TYPES_BY_NAME.get(text)


def string_to_type(text: str) -> SensorType:
    """Lenient lookup that falls back to ``TEMPERATURE`` for unknown names.

    Unknown names are indistinguishable from a genuine ``TEMPERATURE`` here;
    use :func:`parse_sensor_type` when the caller needs to tell them apart.
    """
    return parse_sensor_type(text) or SensorType.TEMPERATURE
