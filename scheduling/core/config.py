"""Environment-driven settings for the scheduling service."""

import os

from pydantic import BaseModel


class SchedulingConfig(BaseModel):
    """Request defaults and logging level for the HTTP layer."""

    work_start: str = "09:00"
    work_end: str = "17:00"
    buffer_minutes: int = 15
    default_duration_minutes: int = 30
    find_time_max_slots: int = 10
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw and raw.strip().isdigit() else default


def load_config() -> SchedulingConfig:
    return SchedulingConfig(
        work_start=os.getenv("WORK_START", "09:00"),
        work_end=os.getenv("WORK_END", "17:00"),
        buffer_minutes=_int_env("BUFFER_MINUTES", 15),
        default_duration_minutes=_int_env("DEFAULT_DURATION_MINUTES", 30),
        find_time_max_slots=_int_env("FIND_TIME_MAX_SLOTS", 10),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
