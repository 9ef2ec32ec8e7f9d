"""Selection of reading subsets by predicate or by IQR outlier bounds."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from models.records import SensorReading, SensorType

MIN_OUTLIER_SAMPLE = 4
IQR_FENCE = 1.5


class InsufficientDataError(ValueError):
    """Raised when a computation needs more values than it was given."""


def quartiles(sorted_values: Sequence[float]) -> Tuple[float, float]:
    """Return ``(q1, q3)`` for ascending ``sorted_values``.

    Q1 is taken at index ``n // 4`` and Q3 at ``3n // 4``; each is averaged
    with its right-hand neighbour unless ``n % 4`` lands exactly on a value
    (``{0, 1}`` for Q1, ``{0, 3}`` for Q3).
    """
    n = len(sorted_values)
    if n < MIN_OUTLIER_SAMPLE:
        raise InsufficientDataError(
            f"Quartiles need at least {MIN_OUTLIER_SAMPLE} values, got {n}."
        )

    remainder = n % 4

    q1_index = n // 4
    if remainder in (0, 1):
        q1 = sorted_values[q1_index]
    else:
        q1 = (sorted_values[q1_index] + sorted_values[q1_index + 1]) / 2.0

    q3_index = (3 * n) // 4
    if remainder in (0, 3):
        q3 = sorted_values[q3_index]
    else:
        q3 = (sorted_values[q3_index] + sorted_values[q3_index + 1]) / 2.0

    return q1, q3


class FilterEngine:
    """Order-preserving filters over reading collections."""

    def filter_by_type(
        self, readings: Iterable[SensorReading], sensor_type: SensorType
    ) -> List[SensorReading]:
        return [reading for reading in readings if reading.sensor_type == sensor_type]

    def filter_by_sensor_id(
        self, readings: Iterable[SensorReading], sensor_id: str
    ) -> List[SensorReading]:
        return [reading for reading in readings if reading.sensor_id == sensor_id]

    def filter_by_value_range(
        self, readings: Iterable[SensorReading], min_value: float, max_value: float
    ) -> List[SensorReading]:
        return [
            reading for reading in readings if min_value <= reading.value <= max_value
        ]

    def outlier_bounds(self, readings: Sequence[SensorReading]) -> Tuple[float, float]:
        q1, q3 = quartiles(sorted(reading.value for reading in readings))
        iqr = q3 - q1
        return q1 - IQR_FENCE * iqr, q3 + IQR_FENCE * iqr

    def remove_outliers(self, readings: Sequence[SensorReading]) -> List[SensorReading]:
        """Drop readings outside the 1.5 * IQR fences.

        Collections smaller than four readings are returned unchanged.
        """
        if len(readings) < MIN_OUTLIER_SAMPLE:
            return list(readings)

        lower, upper = self.outlier_bounds(readings)
        return self.filter_by_value_range(readings, lower, upper)
