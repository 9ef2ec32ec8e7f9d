"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Dict, Mapping

from fastapi import APIRouter, Depends, status

from app.schemas import (
    ProcessRequest,
    ProcessResponse,
    ReadingPayload,
    ReadingsRequest,
    StatisticsPayload,
    StatisticsResponse,
)
from models.records import SensorStatistics, SensorType, type_to_string
from services.pipeline import ProcessingPipeline, build_default_pipeline

router = APIRouter()


def get_pipeline() -> ProcessingPipeline:
    return build_default_pipeline()


def _type_groups(
    groups: Mapping[SensorType, SensorStatistics]
) -> Dict[str, StatisticsPayload]:
    return {
        type_to_string(key): StatisticsPayload.from_statistics(stats)
        for key, stats in groups.items()
    }


def _sensor_groups(groups: Mapping[str, SensorStatistics]) -> Dict[str, StatisticsPayload]:
    return {key: StatisticsPayload.from_statistics(stats) for key, stats in groups.items()}


@router.post(
    "/readings/process",
    response_model=ProcessResponse,
    summary="Drop invalid and outlier readings, then summarize the rest.",
)
async def process_readings(
    payload: ProcessRequest,
    pipeline: ProcessingPipeline = Depends(get_pipeline),
) -> ProcessResponse:
    readings = [item.to_reading() for item in payload.readings]
    result = pipeline.run(readings, normalize=payload.normalize)
    return ProcessResponse(
        input_count=result.input_count,
        valid_count=result.valid_count,
        retained_count=result.retained_count,
        removed_count=result.removed_count,
        readings=[ReadingPayload.from_reading(reading) for reading in result.readings],
        statistics=StatisticsPayload.from_statistics(result.statistics),
        statistics_by_type=_type_groups(result.statistics_by_type),
        statistics_by_sensor_id=_sensor_groups(result.statistics_by_sensor_id),
    )


@router.post(
    "/readings/statistics",
    response_model=StatisticsResponse,
    summary="Summarize readings as given, without cleaning.",
)
async def summarize_readings(
    payload: ReadingsRequest,
    pipeline: ProcessingPipeline = Depends(get_pipeline),
) -> StatisticsResponse:
    readings = [item.to_reading() for item in payload.readings]
    return StatisticsResponse(
        statistics=StatisticsPayload.from_statistics(pipeline.statistics(readings)),
        statistics_by_type=_type_groups(pipeline.statistics_by_type(readings)),
        statistics_by_sensor_id=_sensor_groups(pipeline.statistics_by_sensor_id(readings)),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
