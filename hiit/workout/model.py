"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass


CYCLES_MIN = 1
CYCLES_MAX = 10
REST_PERIOD_MAX_SEC = 300
ROUND_DURATION_MAX_SEC = 600
PREP_SECONDS = 5

DEFAULT_CYCLES = 3
DEFAULT_REST_PERIOD_SEC = 30
DEFAULT_ROUND_DURATION_SEC = 30


@dataclass(frozen=True)
class WorkoutConfig:
    cycles: int
    rest_period_sec: int
    round_durations_sec: tuple[int, ...]

    @property
    def round_count(self) -> int:
        return len(self.round_durations_sec)


DEFAULT_CONFIG = WorkoutConfig(
    cycles=DEFAULT_CYCLES,
    rest_period_sec=DEFAULT_REST_PERIOD_SEC,
    round_durations_sec=(DEFAULT_ROUND_DURATION_SEC,),
)
