"""Validity filtering, outlier removal and statistics orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Dict, Iterable, List, Sequence

from models.records import SensorReading, SensorStatistics, SensorType
from services.filters import FilterEngine
from services.statistics import StatisticsEngine

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Processed readings together with the statistics computed over them."""

    readings: List[SensorReading]
    input_count: int
    valid_count: int
    statistics: SensorStatistics
    statistics_by_type: Dict[SensorType, SensorStatistics] = field(default_factory=dict)
    statistics_by_sensor_id: Dict[str, SensorStatistics] = field(default_factory=dict)

    @property
    def retained_count(self) -> int:
        return len(self.readings)

    @property
    def removed_count(self) -> int:
        return self.input_count - self.retained_count


class ProcessingPipeline:
    """Coordinates the filter and statistics engines over in-memory readings."""

    def __init__(self, filters: FilterEngine, statistics: StatisticsEngine) -> None:
        self.filters = filters
        self.statistics_engine = statistics

    def valid_readings(self, readings: Iterable[SensorReading]) -> List[SensorReading]:
        return [reading for reading in readings if reading.is_valid()]

    def process(self, readings: Sequence[SensorReading]) -> List[SensorReading]:
        """Keep valid readings, then drop IQR outliers among them."""
        valid = self.valid_readings(readings)
        if not valid:
            logger.debug(
                "No valid readings to process",
                extra={"input_count": len(readings), "valid_count": 0},
            )
            return valid

        retained = self.filters.remove_outliers(valid)
        logger.debug(
            "Processed readings",
            extra={
                "input_count": len(readings),
                "valid_count": len(valid),
                "retained_count": len(retained),
            },
        )
        return retained

    def normalize_values(self, readings: Sequence[SensorReading]) -> List[SensorReading]:
        """Return copies of ``readings`` with values rescaled onto ``[0, 1]``.

        When every value is identical the copies keep their original values.
        """
        if not readings:
            return []

        values = [reading.value for reading in readings]
        low, high = min(values), max(values)
        span = high - low
        if span == 0.0:
            return [replace(reading) for reading in readings]

        return [replace(reading, value=(reading.value - low) / span) for reading in readings]

    def statistics(self, readings: Iterable[SensorReading]) -> SensorStatistics:
        return self.statistics_engine.calculate(readings)

    def statistics_by_type(
        self, readings: Iterable[SensorReading]
    ) -> Dict[SensorType, SensorStatistics]:
        return self.statistics_engine.calculate_by_type(readings)

    def statistics_by_sensor_id(
        self, readings: Iterable[SensorReading]
    ) -> Dict[str, SensorStatistics]:
        return self.statistics_engine.calculate_by_sensor_id(readings)

    def filter_by_type(
        self, readings: Iterable[SensorReading], sensor_type: SensorType
    ) -> List[SensorReading]:
        return self.filters.filter_by_type(readings, sensor_type)

    def filter_by_sensor_id(
        self, readings: Iterable[SensorReading], sensor_id: str
    ) -> List[SensorReading]:
        return self.filters.filter_by_sensor_id(readings, sensor_id)

    def filter_by_value_range(
        self, readings: Iterable[SensorReading], min_value: float, max_value: float
    ) -> List[SensorReading]:
        return self.filters.filter_by_value_range(readings, min_value, max_value)

    def run(self, readings: Sequence[SensorReading], normalize: bool = False) -> PipelineResult:
        """Process ``readings`` and compute overall and grouped statistics."""
        valid_count = sum(1 for reading in readings if reading.is_valid())
        processed = self.process(readings)
        if normalize:
            processed = self.normalize_values(processed)

        result = PipelineResult(
            readings=processed,
            input_count=len(readings),
            valid_count=valid_count,
            statistics=self.statistics(processed),
            statistics_by_type=self.statistics_by_type(processed),
            statistics_by_sensor_id=self.statistics_by_sensor_id(processed),
        )
        logger.info(
            "Pipeline run complete",
            extra={
                "input_count": result.input_count,
                "valid_count": result.valid_count,
                "retained_count": result.retained_count,
                "group_count": len(result.statistics_by_sensor_id),
            },
        )
        return result


@lru_cache
def build_default_pipeline() -> ProcessingPipeline:
    """Factory that wires the pipeline with default engines."""
    return ProcessingPipeline(filters=FilterEngine(), statistics=StatisticsEngine())
