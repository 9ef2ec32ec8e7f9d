from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


UNKNOWN_TYPE_DEFAULT = "default"
UNKNOWN_TYPE_SKIP = "skip"
_UNKNOWN_TYPE_POLICIES = (UNKNOWN_TYPE_DEFAULT, UNKNOWN_TYPE_SKIP)

_LOG_LEVEL_ENV = "LOG_LEVEL"
_UNKNOWN_TYPE_POLICY_ENV = "SENSOR_UNKNOWN_TYPE_POLICY"
_GENERATOR_SEED_ENV = "SENSOR_GENERATOR_SEED"


@dataclass(frozen=True)
class Settings:
    log_level: str
    unknown_type_policy: str
    generator_seed: Optional[int]


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def _read_unknown_type_policy(default: str) -> str:
    value = os.getenv(_UNKNOWN_TYPE_POLICY_ENV)
    if value is None:
        return default
    candidate = value.strip().lower()
    return candidate if candidate in _UNKNOWN_TYPE_POLICIES else default


def _read_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return int(candidate)
    except ValueError:
        return None


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_level=_read_log_level("INFO"),
        unknown_type_policy=_read_unknown_type_policy(UNKNOWN_TYPE_DEFAULT),
        generator_seed=_read_optional_int(_GENERATOR_SEED_ENV),
    )
