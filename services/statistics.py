"""Descriptive statistics for sensor readings."""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, Sequence, TypeVar

from models.records import SensorReading, SensorStatistics, SensorType

K = TypeVar("K", bound=Hashable)


def median(sorted_values: Sequence[float]) -> float:
    n = len(sorted_values)
    if n == 0:
        return 0.0
    middle = n // 2
    if n % 2 == 0:
        return (sorted_values[middle - 1] + sorted_values[middle]) / 2.0
    return sorted_values[middle]


def group_readings(
    readings: Iterable[SensorReading], key: Callable[[SensorReading], K]
) -> Dict[K, List[SensorReading]]:
    """Partition readings by ``key``; groups appear in first-seen order."""
    groups: Dict[K, List[SensorReading]] = {}
    for reading in readings:
        groups.setdefault(key(reading), []).append(reading)
    return groups


class StatisticsEngine:
    """Pure statistics component that can be unit tested in isolation."""

    def calculate(self, readings: Iterable[SensorReading]) -> SensorStatistics:
        values = sorted(reading.value for reading in readings)
        if not values:
            return SensorStatistics()

        count = len(values)
        return SensorStatistics(
            min_value=values[0],
            max_value=values[-1],
            mean_value=sum(values) / count,
            median_value=median(values),
            count=count,
        )

    def calculate_by_type(
        self, readings: Iterable[SensorReading]
    ) -> Dict[SensorType, SensorStatistics]:
        groups = group_readings(readings, lambda reading: reading.sensor_type)
        return {key: self.calculate(group) for key, group in groups.items()}

    def calculate_by_sensor_id(
        self, readings: Iterable[SensorReading]
    ) -> Dict[str, SensorStatistics]:
        groups = group_readings(readings, lambda reading: reading.sensor_id)
        return {key: self.calculate(group) for key, group in groups.items()}
