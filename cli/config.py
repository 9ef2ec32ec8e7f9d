from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from models.records import SensorType
from settings import get_settings

DEFAULT_PREVIEW_LIMIT = 10
DEFAULT_SENSOR_IDS = ("SENSOR_001", "SENSOR_002", "SENSOR_003", "SENSOR_004")
DEFAULT_SENSOR_TYPES = (
    SensorType.TEMPERATURE,
    SensorType.PRESSURE,
    SensorType.DEPTH,
    SensorType.SONAR,
)

_PREVIEW_LIMIT_ENV = "SENSOR_PREVIEW_LIMIT"


@dataclass(frozen=True)
class CLIConfig:
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    seed: Optional[int] = None
    sensor_ids: Tuple[str, ...] = DEFAULT_SENSOR_IDS
    sensor_types: Tuple[SensorType, ...] = DEFAULT_SENSOR_TYPES


def _read_positive_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_config(
    preview_limit: Optional[int] = None,
    seed: Optional[int] = None,
) -> CLIConfig:
    if preview_limit is None:
        preview_limit = _read_positive_int(
            os.getenv(_PREVIEW_LIMIT_ENV), DEFAULT_PREVIEW_LIMIT
        )
    if seed is None:
        seed = get_settings().generator_seed
    return CLIConfig(preview_limit=preview_limit, seed=seed)
