"""Workout configuration validation and file loading (CSV/JSON)."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from pathlib import Path

from hiit.workout.model import (
    CYCLES_MAX,
    CYCLES_MIN,
    DEFAULT_CYCLES,
    DEFAULT_REST_PERIOD_SEC,
    REST_PERIOD_MAX_SEC,
    ROUND_DURATION_MAX_SEC,
    WorkoutConfig,
)


class WorkoutConfigError(ValueError):
    """Raised when a workout configuration is out of bounds or unreadable."""


def validate_config(
    cycles: object,
    rest_period_sec: object,
    round_durations_sec: Iterable[object],
) -> WorkoutConfig:
    """Check user input against the workout bounds and build the config.

    Every entry point (CLI flags, web form, workout files) goes through here,
    so a ``WorkoutConfig`` handed to the sequencer is always in range.
    """
    cycles_value = _parse_int_field(raw=cycles, field_name="cycles")
    rest_value = _parse_int_field(raw=rest_period_sec, field_name="rest_period_sec")
    durations = tuple(
        _parse_int_field(raw=raw, field_name="round duration") for raw in round_durations_sec
    )

    if not CYCLES_MIN <= cycles_value <= CYCLES_MAX:
        raise WorkoutConfigError(
            f"Number of cycles must be between {CYCLES_MIN} and {CYCLES_MAX}"
        )
    if not 0 <= rest_value <= REST_PERIOD_MAX_SEC:
        raise WorkoutConfigError(
            f"Rest period must be between 0 and {REST_PERIOD_MAX_SEC} seconds"
        )
    if not durations:
        raise WorkoutConfigError("Please add at least one round duration")
    if any(not 0 <= duration <= ROUND_DURATION_MAX_SEC for duration in durations):
        raise WorkoutConfigError(
            f"All round durations must be between 0 and {ROUND_DURATION_MAX_SEC} seconds"
        )

    return WorkoutConfig(
        cycles=cycles_value,
        rest_period_sec=rest_value,
        round_durations_sec=durations,
    )


def load_workout(
    path: str | Path,
    *,
    cycles: int = DEFAULT_CYCLES,
    rest_period_sec: int = DEFAULT_REST_PERIOD_SEC,
) -> WorkoutConfig:
    """Load a workout file.

    JSON files carry the whole configuration. CSV files list one round per row
    under a ``duration_sec`` header; ``cycles`` and ``rest_period_sec`` fill in
    the rest.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return _load_json(file_path)
    if suffix == ".csv":
        return _load_csv(file_path, cycles=cycles, rest_period_sec=rest_period_sec)
    raise WorkoutConfigError(
        f"Unsupported workout format '{file_path.suffix}'. Use .json or .csv"
    )


def dump_workout(config: WorkoutConfig, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "cycles": config.cycles,
        "rest_period_sec": config.rest_period_sec,
        "round_durations_sec": list(config.round_durations_sec),
    }
    out.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
    return out


def _load_json(path: Path) -> WorkoutConfig:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WorkoutConfigError(f"Invalid JSON: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkoutConfigError(f"Cannot read workout file: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkoutConfigError("Workout JSON must be an object")

    rounds_obj = data.get("round_durations_sec")
    if not isinstance(rounds_obj, list):
        raise WorkoutConfigError("Workout field 'round_durations_sec' must be an array")

    return validate_config(
        data.get("cycles", DEFAULT_CYCLES),
        data.get("rest_period_sec", DEFAULT_REST_PERIOD_SEC),
        rounds_obj,
    )


def _load_csv(path: Path, *, cycles: int, rest_period_sec: int) -> WorkoutConfig:
    durations: list[str | None] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle)
            if "duration_sec" not in (reader.fieldnames or []):
                raise WorkoutConfigError("CSV must contain header: duration_sec")
            for row in reader:
                durations.append(row.get("duration_sec"))
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkoutConfigError(f"Cannot read workout file: {exc}") from exc

    return validate_config(cycles, rest_period_sec, durations)


def _parse_int_field(*, raw: object, field_name: str) -> int:
    # bool is an int subclass; "true" is never a duration.
    if raw is None or isinstance(raw, bool):
        raise WorkoutConfigError(f"invalid {field_name}")
    if isinstance(raw, int):
        return raw
    # Number widgets report whole numbers as floats.
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise WorkoutConfigError(f"invalid {field_name}")
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise WorkoutConfigError(f"invalid {field_name}") from exc
