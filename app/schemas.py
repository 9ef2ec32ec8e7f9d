"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from models.records import SensorReading, SensorStatistics, SensorType


class ReadingPayload(BaseModel):
    """A single sensor reading as exchanged over HTTP."""

    sensor_id: str = ""
    type: SensorType = Field(..., description="Sensor category, e.g. TEMPERATURE.")
    value: float = Field(..., allow_inf_nan=False)
    timestamp: int = Field(..., description="Unix timestamp in milliseconds.")

    def to_reading(self) -> SensorReading:
        return SensorReading(
            sensor_id=self.sensor_id,
            sensor_type=self.type,
            value=self.value,
            timestamp=self.timestamp,
        )

    @classmethod
    def from_reading(cls, reading: SensorReading) -> "ReadingPayload":
        return cls(
            sensor_id=reading.sensor_id,
            type=reading.sensor_type,
            value=reading.value,
            timestamp=reading.timestamp,
        )


class StatisticsPayload(BaseModel):
    """Descriptive statistics for a group of readings."""

    min_value: float = 0.0
    max_value: float = 0.0
    mean_value: float = 0.0
    median_value: float = 0.0
    count: int = Field(0, ge=0)

    @classmethod
    def from_statistics(cls, stats: SensorStatistics) -> "StatisticsPayload":
        return cls(
            min_value=stats.min_value,
            max_value=stats.max_value,
            mean_value=stats.mean_value,
            median_value=stats.median_value,
            count=stats.count,
        )


class ReadingsRequest(BaseModel):
    readings: List[ReadingPayload] = Field(default_factory=list)


class ProcessRequest(ReadingsRequest):
    normalize: bool = Field(
        False, description="Rescale processed values onto the unit interval."
    )


class StatisticsResponse(BaseModel):
    statistics: StatisticsPayload
    statistics_by_type: Dict[str, StatisticsPayload] = Field(default_factory=dict)
    statistics_by_sensor_id: Dict[str, StatisticsPayload] = Field(default_factory=dict)


class ProcessResponse(StatisticsResponse):
    """Cleaned readings plus the statistics computed over them."""

    input_count: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    retained_count: int = Field(..., ge=0)
    removed_count: int = Field(..., ge=0)
    readings: List[ReadingPayload] = Field(default_factory=list)
