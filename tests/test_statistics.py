"""Unit tests for the statistics engine."""

from __future__ import annotations

import pytest

from models.records import SensorReading, SensorStatistics, SensorType
from services.statistics import StatisticsEngine, group_readings, median


def _reading(
    sensor_id: str, value: float, sensor_type: SensorType = SensorType.TEMPERATURE
) -> SensorReading:
    """Helper to build deterministic sensor readings."""

    return SensorReading(sensor_id=sensor_id, sensor_type=sensor_type, value=value, timestamp=1000)


def test_calculate_empty_iterable_returns_default_statistics() -> None:
    engine = StatisticsEngine()

    stats = engine.calculate([])

    assert stats == SensorStatistics(0.0, 0.0, 0.0, 0.0, 0)


def test_calculate_computes_statistics() -> None:
    engine = StatisticsEngine()
    readings = [_reading(f"S{i}", value) for i, value in enumerate([10.0, 20.0, 30.0, 40.0])]

    stats = engine.calculate(readings)

    assert stats == SensorStatistics(
        min_value=10.0, max_value=40.0, mean_value=25.0, median_value=25.0, count=4
    )


def test_calculate_uses_middle_value_for_odd_counts() -> None:
    engine = StatisticsEngine()
    readings = [_reading("S1", value) for value in [9.0, 1.0, 5.0, 100.0, 3.0]]

    stats = engine.calculate(readings)

    assert stats.median_value == 5.0
    assert stats.min_value == 1.0
    assert stats.max_value == 100.0
    assert stats.mean_value == pytest.approx(23.6)
    assert stats.count == 5


def test_calculate_accepts_generators_and_leaves_input_order() -> None:
    engine = StatisticsEngine()
    readings = [_reading("S1", 3.0), _reading("S1", 1.0), _reading("S1", 2.0)]

    stats = engine.calculate(reading for reading in readings)

    assert stats.count == 3
    assert [reading.value for reading in readings] == [3.0, 1.0, 2.0]


@pytest.mark.parametrize(
    "values",
    [
        [1.0],
        [-5.0, 5.0],
        [0.1, 0.2, 0.3],
        [1000.0, -1000.0, 3.5, 3.5, 7.25],
        [2.0, 2.0, 2.0, 2.0],
    ],
)
def test_mean_and_median_lie_between_min_and_max(values: list[float]) -> None:
    stats = StatisticsEngine().calculate([_reading("S1", value) for value in values])

    assert stats.min_value <= stats.mean_value <= stats.max_value
    assert stats.min_value <= stats.median_value <= stats.max_value


def test_median_helper() -> None:
    assert median([]) == 0.0
    assert median([4.0]) == 4.0
    assert median([1.0, 3.0]) == 2.0
    assert median([1.0, 2.0, 10.0]) == 2.0


def test_group_readings_keeps_first_seen_order() -> None:
    readings = [_reading("b", 1.0), _reading("a", 2.0), _reading("b", 3.0)]

    groups = group_readings(readings, lambda reading: reading.sensor_id)

    assert list(groups) == ["b", "a"]
    assert [reading.value for reading in groups["b"]] == [1.0, 3.0]


def test_calculate_by_type_only_reports_present_types() -> None:
    engine = StatisticsEngine()
    readings = [
        _reading("S1", 20.0, SensorType.TEMPERATURE),
        _reading("S2", 1013.0, SensorType.PRESSURE),
        _reading("S3", 30.0, SensorType.TEMPERATURE),
    ]

    by_type = engine.calculate_by_type(readings)

    assert list(by_type) == [SensorType.TEMPERATURE, SensorType.PRESSURE]
    assert by_type[SensorType.TEMPERATURE] == SensorStatistics(20.0, 30.0, 25.0, 25.0, 2)
    assert by_type[SensorType.PRESSURE].count == 1
    assert SensorType.DEPTH not in by_type
    assert sum(stats.count for stats in by_type.values()) == len(readings)


def test_calculate_by_sensor_id_counts_sum_to_input_size() -> None:
    engine = StatisticsEngine()
    readings = [
        _reading("sensor-a", 10.0),
        _reading("sensor-b", 30.0),
        _reading("sensor-a", 20.0),
        _reading("sensor-c", 5.0, SensorType.SONAR),
    ]

    by_sensor = engine.calculate_by_sensor_id(readings)

    assert set(by_sensor) == {"sensor-a", "sensor-b", "sensor-c"}
    assert by_sensor["sensor-a"] == SensorStatistics(10.0, 20.0, 15.0, 15.0, 2)
    assert sum(stats.count for stats in by_sensor.values()) == len(readings)


def test_grouped_statistics_on_empty_input_are_empty() -> None:
    engine = StatisticsEngine()

    assert engine.calculate_by_type([]) == {}
    assert engine.calculate_by_sensor_id([]) == {}
